"""Currency -- ISO 4217 registry and minor-unit exponents."""

from dataclasses import dataclass
from typing import ClassVar

from expense_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int

    @property
    def minor_units_per_major(self) -> int:
        """How many minor units (cents) make one major unit."""
        return 10**self.decimal_places


# ISO 4217 active codes grouped by minor-unit exponent.
# Source: https://www.iso.org/iso-4217-currency-codes.html
_CODES_BY_DECIMAL_PLACES: dict[int, str] = {
    0: """
        BIF CLP DJF GNF ISK JPY KMF KRW PYG RWF UGX UYI VND VUV XAF XOF XPF
        XAG XAU XBA XBB XBC XBD XDR XPD XPT XSU XTS XUA XXX
    """,
    2: """
        AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BMD BND BOB
        BOV BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CNY COP COU CRC CUC
        CUP CVE CZK DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD
        GTQ GYD HKD HNL HRK HTG HUF IDR ILS INR IRR JMD KES KGS KHR KPW KYD
        KZT LAK LBP LKR LRD LSL MAD MDL MGA MKD MMK MNT MOP MRU MUR MVR MWK
        MXN MXV MYR MZN NAD NGN NIO NOK NPR NZD PAB PEN PGK PHP PKR PLN QAR
        RON RSD RUB SAR SBD SCR SDG SEK SGD SHP SLE SLL SOS SRD SSP STN SVC
        SYP SZL THB TJS TMT TOP TRY TTD TWD TZS UAH USD USN UYU UZS VED VES
        WST XCD YER ZAR ZMW ZWL
    """,
    3: "BHD IQD JOD KWD LYD OMR TND",
    4: "CLF UYW",
}


class CurrencyRegistry:
    """Registry of ISO 4217 currencies with their minor-unit exponent."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        code: CurrencyInfo(code, places)
        for places, codes in _CODES_BY_DECIMAL_PLACES.items()
        for code in codes.split()
    }

    @staticmethod
    def _normalize(code: object) -> str | None:
        if not code or not isinstance(code, str):
            return None
        return code.upper().strip()

    @classmethod
    def is_valid(cls, code: object) -> bool:
        """Check if a currency code is valid ISO 4217."""
        return cls._normalize(code) in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: object) -> CurrencyInfo | None:
        """Get currency information by code."""
        normalized = cls._normalize(code)
        if normalized is None:
            return None
        return cls._CURRENCIES.get(normalized)

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Minor-unit exponent of ``code``; unknown codes are rejected."""
        info = cls.get_info(code)
        if info is None:
            raise InvalidCurrencyError(code)
        return info.decimal_places

    @classmethod
    def validate(cls, code: object) -> str:
        """Validate and normalize a currency code.

        There is no fallback to a default currency: an unknown code raises
        ``InvalidCurrencyError``.
        """
        normalized = cls._normalize(code)
        if normalized is None or normalized not in cls._CURRENCIES:
            raise InvalidCurrencyError(code)
        return normalized

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES)
