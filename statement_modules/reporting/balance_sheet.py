"""
Balance sheet rule-set.

Totals each category and checks the accounting equation.  Assets are
summed as signed values; liabilities and equity are summed by magnitude
and stored negative, so a balanced sheet satisfies

    total_assets + total_liabilities + total_equity == 0

within ``ReportingConfig.balance_tolerance``.
"""

from __future__ import annotations

from decimal import Decimal

from statement_kernel.domain.line_items import (
    LineItem,
    batch_period,
    derive,
    find_item,
    relabel,
    sum_matching,
)
from statement_kernel.exceptions import MissingLineItemError, UnbalancedBalanceSheetError
from statement_kernel.logging_config import get_logger
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import ReportType
from statement_modules.reporting.sources import (
    REFERENCE_CATALOG,
    AccountCatalog,
    LineItemSource,
    reference_source,
)

logger = get_logger("modules.reporting.balance_sheet")

TOTAL_ASSETS = "TOTAL_ASSET"
TOTAL_LIABILITIES = "TOTAL_LIAB"
TOTAL_EQUITY = "TOTAL_EQUITY"


class BalanceSheetRuleset:
    """Rule-set for the balance sheet."""

    def __init__(
        self,
        source: LineItemSource | None = None,
        config: ReportingConfig | None = None,
        catalog: AccountCatalog = REFERENCE_CATALOG,
    ):
        self._source = source or reference_source(ReportType.BALANCE_SHEET)
        self._config = config or ReportingConfig()
        self._catalog = catalog

    def report_type(self) -> str:
        return ReportType.BALANCE_SHEET.label

    def load_data(self, period: str) -> tuple[LineItem, ...]:
        return self._source.load(period)

    def before_calculate(self, items: tuple[LineItem, ...]) -> None:
        return None

    def calculate(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        clf = self._config.classification
        # Totals are derived from the raw category lines only.
        assets = sum_matching(items, clf.asset_prefixes)
        liabilities = sum_matching(items, clf.liability_prefixes, absolute=True)
        equity = sum_matching(items, clf.equity_prefixes, absolute=True)

        period = batch_period(items) or ""
        name = self._catalog.name_of
        return items + (
            derive(TOTAL_ASSETS, name(TOTAL_ASSETS), assets, period),
            derive(TOTAL_LIABILITIES, name(TOTAL_LIABILITIES), -liabilities, period),
            derive(TOTAL_EQUITY, name(TOTAL_EQUITY), -equity, period),
        )

    def after_calculate(self, items: tuple[LineItem, ...]) -> None:
        logger.info(
            "balance_sheet_prior_period_comparison_pending",
            extra={
                "total_assets": _value(items, TOTAL_ASSETS),
                "total_liabilities": _value(items, TOTAL_LIABILITIES),
                "total_equity": _value(items, TOTAL_EQUITY),
            },
        )

    def validate(self, items: tuple[LineItem, ...]) -> None:
        assets = find_item(items, TOTAL_ASSETS)
        liabilities = find_item(items, TOTAL_LIABILITIES)
        equity = find_item(items, TOTAL_EQUITY)

        missing = tuple(
            account_id
            for account_id, item in (
                (TOTAL_ASSETS, assets),
                (TOTAL_LIABILITIES, liabilities),
                (TOTAL_EQUITY, equity),
            )
            if item is None
        )
        if missing:
            raise MissingLineItemError(self.report_type(), missing)

        discrepancy = assets.value + liabilities.value + equity.value
        if abs(discrepancy) > self._config.balance_tolerance:
            raise UnbalancedBalanceSheetError(
                self.report_type(),
                total_assets=assets.value,
                total_liabilities=liabilities.value,
                total_equity=equity.value,
                discrepancy=discrepancy,
            )

    def format(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        return tuple(relabel(item, self._marker_for(item)) for item in items)

    def _marker_for(self, item: LineItem) -> str:
        clf = self._config.classification
        markers = self._config.markers
        if clf.matches_prefix(item.account_id, clf.asset_prefixes):
            return markers.asset
        if clf.matches_prefix(item.account_id, clf.liability_prefixes):
            return markers.liability
        if clf.matches_prefix(item.account_id, clf.equity_prefixes):
            return markers.equity
        if clf.matches_prefix(item.account_id, clf.total_prefixes):
            return markers.total
        return ""


def _value(items: tuple[LineItem, ...], account_id: str) -> Decimal | None:
    item = find_item(items, account_id)
    return item.value if item is not None else None
