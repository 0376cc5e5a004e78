"""
Statement rule-set interface.

A rule-set is the variant-specific behaviour bundle for one statement
type.  The pipeline driver is generic over this protocol: adding a new
statement type means writing a new rule-set, never changing the driver.

Required capabilities: ``report_type``, ``load_data``, ``calculate``,
``validate``, ``format``.  Optional hooks: ``before_calculate`` and
``after_calculate``; classes that do not need them mix in
``NoOpCalculationHooks``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from statement_kernel.domain.line_items import LineItem


@runtime_checkable
class StatementRuleset(Protocol):
    """Capability set the pipeline driver runs, in a fixed order."""

    def report_type(self) -> str:
        """Display name of the statement this rule-set produces."""
        ...

    def load_data(self, period: str) -> tuple[LineItem, ...]:
        """Raw line items for ``period``."""
        ...

    def before_calculate(self, items: tuple[LineItem, ...]) -> None:
        """Advisory hook run before ``calculate``."""
        ...

    def calculate(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        """Return ``items`` followed by the derived line items."""
        ...

    def after_calculate(self, items: tuple[LineItem, ...]) -> None:
        """Advisory hook run after ``calculate``."""
        ...

    def validate(self, items: tuple[LineItem, ...]) -> None:
        """Raise ``ValidationError`` if a statement invariant is violated."""
        ...

    def format(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        """Presentation transform; only ``account_name`` may change."""
        ...


class NoOpCalculationHooks:
    """Default (do-nothing) implementations of the two optional hooks."""

    def before_calculate(self, items: tuple[LineItem, ...]) -> None:
        return None

    def after_calculate(self, items: tuple[LineItem, ...]) -> None:
        return None
