"""
Bridges from ``EngineConfig`` to engine and logging inputs.

The engines never import configuration; these helpers hand them plain
values taken from a loaded config.
"""

from __future__ import annotations

import logging

from expense_config.schema import EngineConfig
from expense_engines.debt_summary import DebtSummaryBuilder
from expense_kernel.logging_config import configure_logging


def build_debt_summary_builder(config: EngineConfig) -> DebtSummaryBuilder:
    """A builder restricted to the configured currencies."""
    return DebtSummaryBuilder(supported_currencies=config.currencies.supported)


def apply_logging_policy(
    config: EngineConfig,
    handler: logging.Handler | None = None,
) -> None:
    """
    Configure the expense_kernel logger hierarchy from ``config``.

    The configured level always takes effect. ``handler`` is only attached
    when logging has not been configured yet.
    """
    configure_logging(level=config.logging.level, handler=handler)
    logging.getLogger("expense_kernel").setLevel(config.logging.level)
