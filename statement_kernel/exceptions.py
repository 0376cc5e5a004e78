"""
Typed Exception Hierarchy for the Statement Kernel.

Every error has a typed class, a machine-readable ``code`` class attribute,
and carries its context as structured attributes rather than only in the
message string.  Callers catch by type and read the attributes:

    try:
        result = generate(BalanceSheetRuleset(), "FY2024")
    except UnbalancedBalanceSheetError as e:
        alert(code=e.code, discrepancy=e.discrepancy)
    except ValidationError as e:
        skip_statement(e.report_type, e.reason)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StatementKernelError (base)
    |
    +-- ValidationError
    |   +-- MissingLineItemError
    |   +-- NonPositiveRevenueError
    |   +-- UnbalancedBalanceSheetError
    |   +-- CashReconciliationError
    |
    +-- StageContractError
    |
    +-- ReportTypeError
        +-- UnknownReportTypeError
        +-- DuplicateRulesetError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                        | When Raised
------------|-----------------------------|-------------------------------------------
Validation  | VALIDATION_FAILED           | Statement invariant violated (stage 5)
            | MISSING_LINE_ITEM           | Required summary line was not calculated
            | NON_POSITIVE_REVENUE        | P&L revenue is zero or negative
            | UNBALANCED_BALANCE_SHEET    | Assets + liabilities + equity != 0
            | CASH_RECONCILIATION_FAILED  | Beginning cash + net change != ending cash
------------|-----------------------------|-------------------------------------------
Pipeline    | STAGE_CONTRACT_VIOLATION    | A rule-set stage broke the item contract
------------|-----------------------------|-------------------------------------------
Report type | UNKNOWN_REPORT_TYPE         | No rule-set registered for report type
            | DUPLICATE_RULESET           | Rule-set already registered for type

``ValidationError`` is only raised by a rule-set's ``validate`` stage and is
never swallowed by the pipeline.  ``StageContractError`` signals a bug in a
rule-set (e.g. ``format`` dropped a line), not bad financial data.
"""

from decimal import Decimal


class StatementKernelError(Exception):
    """
    Base exception for all statement kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "STATEMENT_KERNEL_ERROR"


# Validation exceptions


class ValidationError(StatementKernelError):
    """A statement-specific validation invariant failed."""

    code: str = "VALIDATION_FAILED"

    def __init__(self, report_type: str, reason: str):
        self.report_type = report_type
        self.reason = reason
        super().__init__(f"{report_type}: {reason}")


class MissingLineItemError(ValidationError):
    """A summary line required by validation was not produced by calculate."""

    code: str = "MISSING_LINE_ITEM"

    def __init__(self, report_type: str, account_ids: tuple[str, ...]):
        self.account_ids = account_ids
        super().__init__(
            report_type,
            f"required line items were not calculated: {', '.join(account_ids)}",
        )


class NonPositiveRevenueError(ValidationError):
    """Revenue must be strictly positive on a profit and loss statement."""

    code: str = "NON_POSITIVE_REVENUE"

    def __init__(self, report_type: str, revenue: Decimal):
        self.revenue = revenue
        super().__init__(report_type, f"revenue is not positive ({revenue})")


class UnbalancedBalanceSheetError(ValidationError):
    """Assets + liabilities + equity is not within tolerance of zero."""

    code: str = "UNBALANCED_BALANCE_SHEET"

    def __init__(
        self,
        report_type: str,
        total_assets: Decimal,
        total_liabilities: Decimal,
        total_equity: Decimal,
        discrepancy: Decimal,
    ):
        self.total_assets = total_assets
        self.total_liabilities = total_liabilities
        self.total_equity = total_equity
        self.discrepancy = discrepancy
        super().__init__(
            report_type,
            f"balance sheet does not balance (discrepancy: {discrepancy})",
        )


class CashReconciliationError(ValidationError):
    """Beginning cash + net change does not equal ending cash."""

    code: str = "CASH_RECONCILIATION_FAILED"

    def __init__(
        self,
        report_type: str,
        computed: Decimal,
        ending: Decimal,
    ):
        self.computed = computed
        self.ending = ending
        self.discrepancy = computed - ending
        super().__init__(
            report_type,
            f"cash balance does not reconcile "
            f"(computed: {computed}, ending balance: {ending})",
        )


# Pipeline exceptions


class StageContractError(StatementKernelError):
    """A rule-set stage returned items that break the pipeline contract."""

    code: str = "STAGE_CONTRACT_VIOLATION"

    def __init__(self, report_type: str, stage: str, reason: str):
        self.report_type = report_type
        self.stage = stage
        self.reason = reason
        super().__init__(f"{report_type}: stage '{stage}' {reason}")


# Report type exceptions


class ReportTypeError(StatementKernelError):
    """Base exception for report-type registry errors."""

    code: str = "REPORT_TYPE_ERROR"


class UnknownReportTypeError(ReportTypeError):
    """No rule-set is registered for the requested report type."""

    code: str = "UNKNOWN_REPORT_TYPE"

    def __init__(self, report_type: str):
        self.report_type = report_type
        super().__init__(f"No rule-set registered for report type: {report_type}")


class DuplicateRulesetError(ReportTypeError):
    """A rule-set is already registered for the report type."""

    code: str = "DUPLICATE_RULESET"

    def __init__(self, report_type: str):
        self.report_type = report_type
        super().__init__(f"Rule-set already registered for report type: {report_type}")
