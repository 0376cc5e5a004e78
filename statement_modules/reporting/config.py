"""
Reporting Configuration Schema.

Defines account-id classification rules, the presentation markers used by
each statement's ``format`` stage, and the numeric parameters of the
validation checks.  Classification uses account-id prefixes consistent
with the reference chart (``ASSET*``, ``LIAB*``, ``EQUITY*``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from pathlib import Path
from typing import Any, Self

import yaml

from statement_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


def _prefix_tuple(name: str, value: Any) -> tuple[str, ...]:
    """
    Normalise one classification entry to a tuple of prefixes.

    A single string (``asset_prefixes: ASSET`` in YAML) is one prefix, not
    a sequence of one-character prefixes.
    """
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{name} must be a prefix string or a list of prefixes")
    if not all(isinstance(p, str) and p for p in value):
        raise ValueError(f"{name} must contain only non-empty strings")
    return tuple(value)


@dataclass
class AccountClassification:
    """
    Rules for classifying line items into statement categories.

    Prefix matching: an account belongs to a category if its id
    starts with any of the configured prefixes.
    """

    # Profit and loss: derived profit lines
    profit_prefixes: tuple[str, ...] = ("GP", "OI", "NI")

    # Balance sheet
    asset_prefixes: tuple[str, ...] = ("ASSET",)
    liability_prefixes: tuple[str, ...] = ("LIAB",)
    equity_prefixes: tuple[str, ...] = ("EQUITY",)
    total_prefixes: tuple[str, ...] = ("TOTAL",)

    # Cash flow: activities and balance summary rows
    operating_prefixes: tuple[str, ...] = ("CFO",)
    investing_prefixes: tuple[str, ...] = ("CFI",)
    financing_prefixes: tuple[str, ...] = ("CFF",)
    cash_balance_prefixes: tuple[str, ...] = ("CF_",)

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, _prefix_tuple(f.name, getattr(self, f.name)))

    def matches_prefix(self, account_id: str, prefixes: tuple[str, ...]) -> bool:
        """Check if an account id matches any of the given prefixes."""
        return any(account_id.startswith(p) for p in prefixes)


@dataclass
class PresentationMarkers:
    """Label prefixes applied to account names by the format stage."""

    profit: str = "[Profit] "
    asset: str = "[Asset] "
    liability: str = "[Liability] "
    equity: str = "[Equity] "
    total: str = "[Total] "
    operating: str = "[Operating] "
    investing: str = "[Investing] "
    financing: str = "[Financing] "
    balance: str = "[Balance] "


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls classification, presentation and validation parameters.
    """

    classification: AccountClassification = field(
        default_factory=AccountClassification,
    )
    markers: PresentationMarkers = field(default_factory=PresentationMarkers)

    # Maximum absolute discrepancy accepted by the balance checks
    balance_tolerance: Decimal = Decimal("0.01")

    # Opening cash for the cash flow statement; there is no prior-period
    # roll-forward, so it is supplied here.
    beginning_cash: Decimal = Decimal("400000")

    entity_name: str = "Company"
    default_currency: str = "USD"
    display_precision: int = 2

    def __post_init__(self):
        self.balance_tolerance = Decimal(str(self.balance_tolerance))
        self.beginning_cash = Decimal(str(self.beginning_cash))
        if self.balance_tolerance < 0:
            raise ValueError("balance_tolerance cannot be negative")
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter ISO 4217 code")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        data = dict(data)
        if isinstance(data.get("classification"), dict):
            data["classification"] = AccountClassification(**data["classification"])
        if isinstance(data.get("markers"), dict):
            data["markers"] = PresentationMarkers(**data["markers"])
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """
        Load config from a YAML file.

        The file holds a mapping with the same keys as ``from_dict``; an
        empty file yields the defaults.

        Raises:
            FileNotFoundError: if the file does not exist.
            yaml.YAMLError: if the file contains invalid YAML.
            ValueError: if the document is not a mapping or a value is invalid.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Reporting config in {path} must be a mapping")
        logger.info("reporting_config_loading_from_yaml", extra={"path": str(path)})
        return cls.from_dict(data)
