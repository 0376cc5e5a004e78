"""
Financial Reporting Module (``statement_modules.reporting``).

Responsibility
--------------
Statement rule-sets for the profit and loss statement, balance sheet and
cash flow statement, and the ``ReportingService`` that runs them through
the kernel pipeline.

Architecture position
---------------------
**Modules layer** -- rule-sets are pure apart from advisory logging in
their hooks.  Raw line items come from injected ``LineItemSource``
collaborators; finished reports go to ``ReportExporter`` collaborators.

Invariants enforced
-------------------
* P&L: net income is present; revenue, when present, is positive.
* Balance sheet: assets + liabilities + equity within tolerance of zero.
* Cash flow: beginning cash + net change equals ending cash within tolerance.

Failure modes
-------------
* Invariant violation -> ``ValidationError`` subclass with the discrepancy.
"""

from statement_modules.reporting.balance_sheet import BalanceSheetRuleset
from statement_modules.reporting.cash_flow import CashFlowRuleset
from statement_modules.reporting.config import (
    AccountClassification,
    PresentationMarkers,
    ReportingConfig,
)
from statement_modules.reporting.models import BatchResult, FailurePolicy, ReportType
from statement_modules.reporting.profit_loss import ProfitAndLossRuleset
from statement_modules.reporting.render import (
    JsonReportExporter,
    ReportExporter,
    TextReportExporter,
    render_to_dict,
)
from statement_modules.reporting.service import ReportingService, build_default_rulesets
from statement_modules.reporting.sources import (
    REFERENCE_CATALOG,
    AccountCatalog,
    AccountInfo,
    LineItemSource,
    StaticLineItemSource,
    reference_source,
)

__all__ = [
    # Service
    "ReportingService",
    "build_default_rulesets",
    # Rule-sets
    "BalanceSheetRuleset",
    "CashFlowRuleset",
    "ProfitAndLossRuleset",
    # Config
    "AccountClassification",
    "PresentationMarkers",
    "ReportingConfig",
    # Models
    "BatchResult",
    "FailurePolicy",
    "ReportType",
    # Sources
    "REFERENCE_CATALOG",
    "AccountCatalog",
    "AccountInfo",
    "LineItemSource",
    "StaticLineItemSource",
    "reference_source",
    # Exporters
    "JsonReportExporter",
    "ReportExporter",
    "TextReportExporter",
    "render_to_dict",
]
