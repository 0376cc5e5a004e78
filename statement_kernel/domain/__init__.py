"""
Pure domain layer.

Line items, report envelopes and the rule-set protocol, with NO
dependencies on I/O.  All domain objects are immutable and deterministic.
"""

from statement_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from statement_kernel.domain.line_items import (
    LineItem,
    batch_period,
    derive,
    find_item,
    relabel,
    sum_matching,
    sum_values,
    value_of,
)
from statement_kernel.domain.report import ReportMetadata, ReportResult, assemble_report
from statement_kernel.domain.ruleset import NoOpCalculationHooks, StatementRuleset

__all__ = [
    "Clock",
    "DeterministicClock",
    "LineItem",
    "NoOpCalculationHooks",
    "ReportMetadata",
    "ReportResult",
    "StatementRuleset",
    "SystemClock",
    "assemble_report",
    "batch_period",
    "derive",
    "find_item",
    "relabel",
    "sum_matching",
    "sum_values",
    "value_of",
]
