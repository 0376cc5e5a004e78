"""
Cash flow statement rule-set.

    net change    = operating + investing + financing
    ending cash   = beginning cash + net change

Beginning cash is an explicit input (``beginning_cash`` argument, falling
back to ``ReportingConfig.beginning_cash``).  It is not rolled forward
from a prior period's balance sheet.
"""

from __future__ import annotations

from decimal import Decimal

from statement_kernel.domain.line_items import (
    LineItem,
    batch_period,
    derive,
    find_item,
    relabel,
    value_of,
)
from statement_kernel.domain.ruleset import NoOpCalculationHooks
from statement_kernel.exceptions import CashReconciliationError, MissingLineItemError
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import ReportType
from statement_modules.reporting.sources import (
    REFERENCE_CATALOG,
    AccountCatalog,
    LineItemSource,
    reference_source,
)

OPERATING = "CFO001"
INVESTING = "CFI001"
FINANCING = "CFF001"

BEGINNING_CASH = "CF_BEGIN"
NET_CHANGE = "CF_NET"
ENDING_CASH = "CF_END"


class CashFlowRuleset(NoOpCalculationHooks):
    """Rule-set for the cash flow statement."""

    def __init__(
        self,
        source: LineItemSource | None = None,
        config: ReportingConfig | None = None,
        catalog: AccountCatalog = REFERENCE_CATALOG,
        beginning_cash: Decimal | None = None,
    ):
        self._source = source or reference_source(ReportType.CASH_FLOW)
        self._config = config or ReportingConfig()
        self._catalog = catalog
        self._beginning_cash = (
            Decimal(str(beginning_cash))
            if beginning_cash is not None
            else self._config.beginning_cash
        )

    @property
    def beginning_cash(self) -> Decimal:
        return self._beginning_cash

    def report_type(self) -> str:
        return ReportType.CASH_FLOW.label

    def load_data(self, period: str) -> tuple[LineItem, ...]:
        return self._source.load(period)

    def calculate(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        net_change = (
            value_of(items, OPERATING)
            + value_of(items, INVESTING)
            + value_of(items, FINANCING)
        )
        ending_cash = self._beginning_cash + net_change

        period = batch_period(items) or ""
        name = self._catalog.name_of
        return items + (
            derive(BEGINNING_CASH, name(BEGINNING_CASH), self._beginning_cash, period),
            derive(NET_CHANGE, name(NET_CHANGE), net_change, period),
            derive(ENDING_CASH, name(ENDING_CASH), ending_cash, period),
        )

    def validate(self, items: tuple[LineItem, ...]) -> None:
        begin = find_item(items, BEGINNING_CASH)
        net = find_item(items, NET_CHANGE)
        end = find_item(items, ENDING_CASH)

        missing = tuple(
            account_id
            for account_id, item in (
                (BEGINNING_CASH, begin),
                (NET_CHANGE, net),
                (ENDING_CASH, end),
            )
            if item is None
        )
        if missing:
            raise MissingLineItemError(self.report_type(), missing)

        computed = begin.value + net.value
        if abs(computed - end.value) > self._config.balance_tolerance:
            raise CashReconciliationError(
                self.report_type(), computed=computed, ending=end.value,
            )

    def format(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        return tuple(relabel(item, self._marker_for(item)) for item in items)

    def _marker_for(self, item: LineItem) -> str:
        clf = self._config.classification
        markers = self._config.markers
        if clf.matches_prefix(item.account_id, clf.operating_prefixes):
            return markers.operating
        if clf.matches_prefix(item.account_id, clf.investing_prefixes):
            return markers.investing
        if clf.matches_prefix(item.account_id, clf.financing_prefixes):
            return markers.financing
        if clf.matches_prefix(item.account_id, clf.cash_balance_prefixes):
            return markers.balance
        return ""
