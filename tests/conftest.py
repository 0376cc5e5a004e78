"""
Pytest fixtures for the statement pipeline test suite.

Provides:
- A deterministic clock for reproducible ``generated_at`` values
- Default reporting configuration
- Helpers for building raw line-item batches

No database, no I/O: every test runs on in-memory line items.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from statement_kernel.domain.clock import DeterministicClock
from statement_kernel.domain.line_items import LineItem
from statement_modules.reporting.config import ReportingConfig

PERIOD = "FY2024"
FIXED_TIME = datetime(2025, 3, 31, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock(FIXED_TIME)


@pytest.fixture
def reporting_config() -> ReportingConfig:
    """Standard reporting configuration for tests."""
    return ReportingConfig.with_defaults()


def make_items(period: str = PERIOD, **balances: str | int | Decimal) -> tuple[LineItem, ...]:
    """
    Build a raw batch from keyword balances, in keyword order.

    The account name is the account id, so formatted names are easy to
    assert on.
    """
    return tuple(
        LineItem(
            account_id=account_id,
            account_name=account_id,
            value=Decimal(str(value)),
            period=period,
        )
        for account_id, value in balances.items()
    )


class ListSource:
    """LineItemSource serving a fixed batch, re-stamped with the period."""

    def __init__(self, items: tuple[LineItem, ...]):
        self._items = items

    def load(self, period: str) -> tuple[LineItem, ...]:
        return tuple(
            LineItem(i.account_id, i.account_name, i.value, period)
            for i in self._items
        )
