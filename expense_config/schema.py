"""
Engine configuration schema.

YAML configuration sets are parsed into these frozen types by the loader.
Nothing here reads files.
"""

from __future__ import annotations

from dataclasses import dataclass

from expense_kernel.domain.currency import CurrencyRegistry


@dataclass(frozen=True)
class CurrencyPolicy:
    """Which currencies a deployment accepts for expenses."""

    supported: frozenset[str]

    def __post_init__(self) -> None:
        if not self.supported:
            raise ValueError("At least one supported currency is required")
        # Every entry must itself be ISO 4217
        object.__setattr__(
            self,
            "supported",
            frozenset(CurrencyRegistry.validate(code) for code in self.supported),
        )


@dataclass(frozen=True)
class LoggingPolicy:
    """Log level for the expense_kernel logger hierarchy."""

    level: str = "INFO"

    def __post_init__(self) -> None:
        normalized = self.level.upper().strip()
        if normalized not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {self.level!r}")
        object.__setattr__(self, "level", normalized)


@dataclass(frozen=True)
class EngineConfig:
    """A parsed, validated configuration set."""

    config_id: str
    version: str
    currencies: CurrencyPolicy
    logging: LoggingPolicy
    checksum: str
