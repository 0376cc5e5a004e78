"""
Line-item sources and the account catalog.

The pipeline obtains raw line items from a ``LineItemSource`` collaborator
and account names from an ``AccountCatalog``.  Both are injected into the
rule-sets; neither is process-wide state.  The reference data below is the
standard sample company used when no other source is supplied.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from statement_kernel.domain.line_items import LineItem
from statement_kernel.logging_config import get_logger
from statement_modules.reporting.models import ReportType

logger = get_logger("modules.reporting.sources")


@dataclasses.dataclass(frozen=True)
class AccountInfo:
    """Snapshot of account metadata."""

    account_id: str
    name: str
    statement: ReportType
    sort_order: int = 0


class AccountCatalog:
    """
    Read-only lookup of account metadata by account id.

    Built once from a list of ``AccountInfo``; duplicate ids are rejected.
    """

    def __init__(self, accounts: Iterable[AccountInfo]):
        by_id: dict[str, AccountInfo] = {}
        for acct in accounts:
            if acct.account_id in by_id:
                raise ValueError(f"Duplicate account id in catalog: {acct.account_id}")
            by_id[acct.account_id] = acct
        self._accounts = MappingProxyType(by_id)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __iter__(self) -> Iterator[AccountInfo]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def get(self, account_id: str) -> AccountInfo | None:
        return self._accounts.get(account_id)

    def name_of(self, account_id: str) -> str:
        """Account name, or the id itself for accounts not in the catalog."""
        acct = self._accounts.get(account_id)
        return acct.name if acct is not None else account_id

    def for_statement(self, statement: ReportType) -> tuple[AccountInfo, ...]:
        """Accounts of one statement, in presentation order."""
        return tuple(
            sorted(
                (a for a in self._accounts.values() if a.statement == statement),
                key=lambda a: (a.sort_order, a.account_id),
            )
        )


@runtime_checkable
class LineItemSource(Protocol):
    """Supplies the raw line items of one statement for a period."""

    def load(self, period: str) -> tuple[LineItem, ...]:
        ...


class StaticLineItemSource:
    """
    In-memory source: fixed balances stamped with the requested period.

    Balances keep their insertion order; names come from the catalog.
    """

    def __init__(
        self,
        balances: Mapping[str, Decimal | int | str],
        catalog: AccountCatalog,
    ):
        self._balances = tuple(
            (account_id, Decimal(str(value))) for account_id, value in balances.items()
        )
        self._catalog = catalog

    def load(self, period: str) -> tuple[LineItem, ...]:
        items = tuple(
            LineItem(
                account_id=account_id,
                account_name=self._catalog.name_of(account_id),
                value=value,
                period=period,
            )
            for account_id, value in self._balances
        )
        logger.debug(
            "line_items_loaded",
            extra={"period": period, "item_count": len(items)},
        )
        return items


# =========================================================================
# Reference data
# =========================================================================

_PL = ReportType.PROFIT_AND_LOSS
_BS = ReportType.BALANCE_SHEET
_CF = ReportType.CASH_FLOW

REFERENCE_CATALOG = AccountCatalog([
    AccountInfo("REV001", "Revenue", _PL, 1),
    AccountInfo("COST001", "Cost of Sales", _PL, 2),
    AccountInfo("GP001", "Gross Profit", _PL, 3),
    AccountInfo("SG001", "SG&A Expenses", _PL, 4),
    AccountInfo("OI001", "Operating Income", _PL, 5),
    AccountInfo("TAX001", "Income Taxes", _PL, 6),
    AccountInfo("NI001", "Net Income", _PL, 7),
    AccountInfo("ASSET001", "Cash and Deposits", _BS, 10),
    AccountInfo("ASSET002", "Accounts Receivable", _BS, 11),
    AccountInfo("ASSET003", "Property, Plant and Equipment", _BS, 12),
    AccountInfo("LIAB001", "Accounts Payable", _BS, 20),
    AccountInfo("LIAB002", "Borrowings", _BS, 21),
    AccountInfo("EQUITY001", "Share Capital", _BS, 30),
    AccountInfo("EQUITY002", "Retained Earnings", _BS, 31),
    AccountInfo("TOTAL_ASSET", "Total Assets", _BS, 40),
    AccountInfo("TOTAL_LIAB", "Total Liabilities", _BS, 41),
    AccountInfo("TOTAL_EQUITY", "Total Equity", _BS, 42),
    AccountInfo("CFO001", "Cash Flow from Operating Activities", _CF, 50),
    AccountInfo("CFI001", "Cash Flow from Investing Activities", _CF, 51),
    AccountInfo("CFF001", "Cash Flow from Financing Activities", _CF, 52),
    AccountInfo("CF_BEGIN", "Beginning Cash Balance", _CF, 60),
    AccountInfo("CF_NET", "Net Change in Cash and Cash Equivalents", _CF, 61),
    AccountInfo("CF_END", "Ending Cash Balance", _CF, 62),
])

REFERENCE_BALANCES: dict[ReportType, dict[str, Decimal]] = {
    _PL: {
        "REV001": Decimal("1000000"),
        "COST001": Decimal("-600000"),
        "SG001": Decimal("-200000"),
        "TAX001": Decimal("-50000"),
    },
    _BS: {
        "ASSET001": Decimal("500000"),
        "ASSET002": Decimal("300000"),
        "ASSET003": Decimal("2000000"),
        "LIAB001": Decimal("-400000"),
        "LIAB002": Decimal("-1000000"),
        "EQUITY001": Decimal("-800000"),
        "EQUITY002": Decimal("-600000"),
    },
    _CF: {
        "CFO001": Decimal("300000"),
        "CFI001": Decimal("-150000"),
        "CFF001": Decimal("-100000"),
    },
}


def reference_source(report_type: ReportType) -> StaticLineItemSource:
    """Source serving the reference balances of one statement."""
    return StaticLineItemSource(REFERENCE_BALANCES[report_type], REFERENCE_CATALOG)
