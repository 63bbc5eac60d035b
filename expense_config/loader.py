"""
Configuration Loader (``expense_config.loader``).

Responsibility
--------------
Loads YAML configuration set files and parses them into the frozen
``expense_config.schema`` types. Runtime callers go through
``expense_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required fields have no silent defaults.
* ``compute_checksum`` is a deterministic SHA-256 of the canonical JSON
  form, used for configuration identity.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown currency in the supported list -> ``InvalidCurrencyError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from expense_config.schema import CurrencyPolicy, EngineConfig, LoggingPolicy


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 checksum of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_currency_policy(data: dict[str, Any]) -> CurrencyPolicy:
    """Parse the ``currencies`` section."""
    supported = data["supported"]
    if isinstance(supported, str) or not isinstance(supported, list):
        raise ValueError("currencies.supported must be a list of ISO 4217 codes")
    return CurrencyPolicy(supported=frozenset(supported))


def parse_logging_policy(data: dict[str, Any] | None) -> LoggingPolicy:
    """Parse the optional ``logging`` section."""
    if not data:
        return LoggingPolicy()
    return LoggingPolicy(level=str(data.get("level", "INFO")))


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """
    Parse a whole configuration set.

    Preconditions:
        - ``data`` has ``config_id``, ``version`` and ``currencies`` keys.
    """
    return EngineConfig(
        config_id=str(data["config_id"]),
        version=str(data["version"]),
        currencies=parse_currency_policy(data["currencies"]),
        logging=parse_logging_policy(data.get("logging")),
        checksum=compute_checksum(data),
    )
