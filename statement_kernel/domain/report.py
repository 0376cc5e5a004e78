"""
Report envelope and result assembler.

``ReportResult`` is the immutable output of one pipeline run.  It is
created exactly once, by ``assemble_report``, from the formatted line
items of the final stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from statement_kernel.domain.clock import Clock
from statement_kernel.domain.line_items import LineItem, sum_values


@dataclass(frozen=True)
class ReportMetadata:
    """Aggregate metadata attached to every report."""

    generated_at: datetime
    total_value: Decimal


@dataclass(frozen=True)
class ReportResult:
    """A finished financial statement for one period."""

    report_type: str
    period: str
    data: tuple[LineItem, ...]
    metadata: ReportMetadata

    @property
    def account_ids(self) -> tuple[str, ...]:
        return tuple(item.account_id for item in self.data)


def assemble_report(
    report_type: str,
    period: str,
    formatted: tuple[LineItem, ...],
    clock: Clock,
) -> ReportResult:
    """
    Build the report envelope from the formatted line items.

    ``total_value`` is the sum over the formatted list, i.e. raw and
    derived lines alike.
    """
    return ReportResult(
        report_type=report_type,
        period=period,
        data=tuple(formatted),
        metadata=ReportMetadata(
            generated_at=clock.now(),
            total_value=sum_values(formatted),
        ),
    )
