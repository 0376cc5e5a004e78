"""
Financial Reporting Domain Models (``statement_modules.reporting.models``).

Responsibility
--------------
Enums and frozen value objects shared by the statement rule-sets and the
reporting service: report types, batch failure policy, and the batch
result returned by ``ReportingService.generate_batch``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from statement_kernel.domain.report import ReportResult
from statement_kernel.exceptions import ValidationError


class ReportType(str, Enum):
    """Types of financial statements."""

    PROFIT_AND_LOSS = "profit_and_loss"
    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW = "cash_flow"

    @property
    def label(self) -> str:
        """Display name written into ``ReportResult.report_type``."""
        return _LABELS[self]


_LABELS = {
    ReportType.PROFIT_AND_LOSS: "PL (Profit and Loss Statement)",
    ReportType.BALANCE_SHEET: "BS (Balance Sheet)",
    ReportType.CASH_FLOW: "CF (Cash Flow Statement)",
}


class FailurePolicy(str, Enum):
    """What a batch does when one statement fails validation."""

    ABORT = "abort"  # re-raise, the whole batch fails
    SKIP = "skip"  # record the failure, continue with the next statement


@dataclass(frozen=True)
class BatchResult:
    """Outcome of generating several statements for one period."""

    period: str
    reports: tuple[ReportResult, ...] = ()
    # (report type key, error) for each statement skipped under FailurePolicy.SKIP
    failures: tuple[tuple[str, ValidationError], ...] = field(default=())

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def report_for(self, report_type: ReportType | str) -> ReportResult | None:
        """
        Find a report by type.

        Built-in types (member or value) match on their display label; any
        other string matches the display name its rule-set reports.
        """
        try:
            label = ReportType(report_type).label
        except ValueError:
            label = str(report_type)
        for report in self.reports:
            if report.report_type == label:
                return report
        return None
