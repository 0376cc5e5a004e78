"""
Line items -- the unit of financial data flowing through the pipeline.

A ``LineItem`` is one named, signed numeric fact for a reporting period.
Sign convention: inflows and assets are positive; outflows, liabilities
and equity are negative.

Every stage of the pipeline produces a *new* tuple of line items; items are
frozen and are never changed in place.  The helpers below are pure
functions over those tuples.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence
from decimal import Decimal

ZERO = Decimal("0")


@dataclasses.dataclass(frozen=True)
class LineItem:
    """One named, signed financial value for a period."""

    account_id: str
    account_name: str
    value: Decimal
    period: str


def find_item(items: Iterable[LineItem], account_id: str) -> LineItem | None:
    """Return the first item with ``account_id``, or None."""
    for item in items:
        if item.account_id == account_id:
            return item
    return None


def value_of(items: Iterable[LineItem], account_id: str) -> Decimal:
    """Value of ``account_id``; a missing account counts as zero."""
    item = find_item(items, account_id)
    return item.value if item is not None else ZERO


def sum_values(items: Iterable[LineItem]) -> Decimal:
    """Arithmetic sum of all item values."""
    return sum((item.value for item in items), ZERO)


def sum_matching(
    items: Iterable[LineItem],
    prefixes: tuple[str, ...],
    *,
    absolute: bool = False,
) -> Decimal:
    """
    Sum the values of items whose account id starts with any prefix.

    With ``absolute=True`` the magnitudes are summed, which is how
    credit-side categories (liabilities, equity) are totalled.
    """
    total = ZERO
    for item in items:
        if item.account_id.startswith(prefixes):
            total += abs(item.value) if absolute else item.value
    return total


def batch_period(items: Sequence[LineItem]) -> str | None:
    """Period of the batch (taken from the first item)."""
    return items[0].period if items else None


def derive(
    account_id: str,
    account_name: str,
    value: Decimal,
    period: str,
) -> LineItem:
    """Build a derived line item."""
    return LineItem(
        account_id=account_id,
        account_name=account_name,
        value=value,
        period=period,
    )


def relabel(item: LineItem, prefix: str) -> LineItem:
    """Return a copy of ``item`` with ``prefix`` prepended to its name."""
    if not prefix:
        return item
    return dataclasses.replace(item, account_name=f"{prefix}{item.account_name}")


def duplicate_account_ids(items: Iterable[LineItem]) -> tuple[str, ...]:
    """Account ids occurring more than once, in first-seen order."""
    seen: set[str] = set()
    dupes: list[str] = []
    for item in items:
        if item.account_id in seen and item.account_id not in dupes:
            dupes.append(item.account_id)
        seen.add(item.account_id)
    return tuple(dupes)
