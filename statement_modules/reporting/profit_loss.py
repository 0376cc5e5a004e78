"""
Profit and loss statement rule-set.

Multi-step roll-up from four raw lines (costs and expenses negative):

    Revenue
    + Cost of Sales         (negative)
    = Gross Profit
    + SG&A Expenses         (negative)
    = Operating Income
    + Income Taxes          (negative)
    = Net Income

Missing raw lines count as zero.  Validation requires a net income line
and, when a revenue line is present, strictly positive revenue.
"""

from __future__ import annotations

from statement_kernel.domain.line_items import (
    LineItem,
    batch_period,
    derive,
    find_item,
    relabel,
    value_of,
)
from statement_kernel.exceptions import MissingLineItemError, NonPositiveRevenueError
from statement_kernel.logging_config import get_logger
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import ReportType
from statement_modules.reporting.sources import (
    REFERENCE_CATALOG,
    AccountCatalog,
    LineItemSource,
    reference_source,
)

logger = get_logger("modules.reporting.profit_loss")

REVENUE = "REV001"
COST_OF_SALES = "COST001"
SG_EXPENSES = "SG001"
TAXES = "TAX001"

GROSS_PROFIT = "GP001"
OPERATING_INCOME = "OI001"
NET_INCOME = "NI001"


class ProfitAndLossRuleset:
    """Rule-set for the profit and loss statement."""

    def __init__(
        self,
        source: LineItemSource | None = None,
        config: ReportingConfig | None = None,
        catalog: AccountCatalog = REFERENCE_CATALOG,
    ):
        self._source = source or reference_source(ReportType.PROFIT_AND_LOSS)
        self._config = config or ReportingConfig()
        self._catalog = catalog

    def report_type(self) -> str:
        return ReportType.PROFIT_AND_LOSS.label

    def load_data(self, period: str) -> tuple[LineItem, ...]:
        return self._source.load(period)

    def before_calculate(self, items: tuple[LineItem, ...]) -> None:
        logger.info(
            "profit_loss_prior_period_comparison_pending",
            extra={"item_count": len(items)},
        )

    def calculate(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        revenue = value_of(items, REVENUE)
        cost_of_sales = value_of(items, COST_OF_SALES)
        sg_expenses = value_of(items, SG_EXPENSES)
        taxes = value_of(items, TAXES)

        gross_profit = revenue + cost_of_sales
        operating_income = gross_profit + sg_expenses
        net_income = operating_income + taxes

        period = batch_period(items) or ""
        name = self._catalog.name_of
        return items + (
            derive(GROSS_PROFIT, name(GROSS_PROFIT), gross_profit, period),
            derive(OPERATING_INCOME, name(OPERATING_INCOME), operating_income, period),
            derive(NET_INCOME, name(NET_INCOME), net_income, period),
        )

    def after_calculate(self, items: tuple[LineItem, ...]) -> None:
        return None

    def validate(self, items: tuple[LineItem, ...]) -> None:
        if find_item(items, NET_INCOME) is None:
            raise MissingLineItemError(self.report_type(), (NET_INCOME,))
        revenue = find_item(items, REVENUE)
        if revenue is not None and revenue.value <= 0:
            raise NonPositiveRevenueError(self.report_type(), revenue.value)

    def format(self, items: tuple[LineItem, ...]) -> tuple[LineItem, ...]:
        clf = self._config.classification
        marker = self._config.markers.profit
        return tuple(
            relabel(item, marker)
            if clf.matches_prefix(item.account_id, clf.profit_prefixes)
            else item
            for item in items
        )
