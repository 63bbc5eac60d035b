"""
expense_config -- single public entrypoint for engine configuration.

Responsibility:
    ``get_active_config()`` is the only way to obtain configuration at
    runtime. YAML loading is internal; callers receive a frozen
    ``EngineConfig``.

Architecture position:
    Configuration sits above ``expense_kernel`` and ``expense_engines``.
    Neither of those may import from ``expense_config``; the bridges in
    this package translate configuration into engine inputs.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the given name.
    - ``KeyError`` / ``ValueError`` -- structural validation failures.
    - ``InvalidCurrencyError`` -- a supported currency is not ISO 4217.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``EXPENSE_CONFIG_TRACE`` log entry with the config id, version and
    checksum.
"""

from __future__ import annotations

from pathlib import Path

from expense_config.bridges import apply_logging_policy, build_debt_summary_builder
from expense_config.loader import load_yaml_file, parse_engine_config
from expense_config.schema import CurrencyPolicy, EngineConfig, LoggingPolicy
from expense_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    name: str = "default",
    config_dir: Path | None = None,
) -> EngineConfig:
    """The ONLY public configuration entrypoint.

    Args:
        name: Configuration set name; resolves to ``<config_dir>/<name>.yaml``.
        config_dir: Override path to the configuration sets directory.
            Defaults to ``expense_config/sets/``.

    Returns:
        The parsed ``EngineConfig``.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"No configuration set named {name!r} in {sets_dir}")

    config = parse_engine_config(load_yaml_file(path))

    _logger.info(
        "EXPENSE_CONFIG_TRACE",
        extra={
            "trace_type": "EXPENSE_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "supported_currencies": sorted(config.currencies.supported),
        },
    )
    return config


__all__ = [
    "CurrencyPolicy",
    "EngineConfig",
    "LoggingPolicy",
    "apply_logging_policy",
    "build_debt_summary_builder",
    "get_active_config",
]
