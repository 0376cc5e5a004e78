"""Tests for the cash flow rule-set."""

from __future__ import annotations

from decimal import Decimal

import pytest

from statement_kernel.domain.line_items import find_item, relabel, value_of
from statement_kernel.exceptions import CashReconciliationError, MissingLineItemError
from statement_kernel.services.report_pipeline import generate
from statement_modules.reporting.cash_flow import (
    BEGINNING_CASH,
    ENDING_CASH,
    NET_CHANGE,
    CashFlowRuleset,
)
from statement_modules.reporting.config import ReportingConfig
from tests.conftest import PERIOD, ListSource, make_items


def _reference_batch():
    return make_items(CFO001=300000, CFI001=-150000, CFF001=-100000)


class TestBeginningCash:

    def test_defaults_to_config(self):
        assert CashFlowRuleset().beginning_cash == Decimal("400000")

    def test_config_value(self):
        ruleset = CashFlowRuleset(config=ReportingConfig(beginning_cash=Decimal("1000")))
        assert ruleset.beginning_cash == Decimal("1000")

    def test_argument_overrides_config(self):
        ruleset = CashFlowRuleset(
            config=ReportingConfig(beginning_cash=Decimal("1000")),
            beginning_cash=Decimal("25"),
        )
        assert ruleset.beginning_cash == Decimal("25")

    def test_zero_is_not_replaced_by_default(self):
        assert CashFlowRuleset(beginning_cash=Decimal("0")).beginning_cash == Decimal("0")


class TestCalculate:

    def test_reference_roll_forward(self):
        calculated = CashFlowRuleset().calculate(_reference_batch())
        assert value_of(calculated, BEGINNING_CASH) == Decimal("400000")
        assert value_of(calculated, NET_CHANGE) == Decimal("50000")
        assert value_of(calculated, ENDING_CASH) == Decimal("450000")

    def test_summary_rows_appended(self):
        raw = _reference_batch()
        calculated = CashFlowRuleset().calculate(raw)
        assert calculated[:3] == raw
        assert [i.account_id for i in calculated[3:]] == [BEGINNING_CASH, NET_CHANGE, ENDING_CASH]

    def test_injected_beginning_cash(self):
        calculated = CashFlowRuleset(beginning_cash=Decimal("10000")).calculate(_reference_batch())
        assert value_of(calculated, ENDING_CASH) == Decimal("60000")

    def test_missing_activity_counts_as_zero(self):
        calculated = CashFlowRuleset().calculate(make_items(CFO001=75))
        assert value_of(calculated, NET_CHANGE) == Decimal("75")
        assert value_of(calculated, ENDING_CASH) == Decimal("400075")

    def test_net_outflow(self):
        calculated = CashFlowRuleset(beginning_cash=Decimal("100")).calculate(
            make_items(CFO001=-50, CFI001=-80, CFF001=10),
        )
        assert value_of(calculated, ENDING_CASH) == Decimal("-20")


class TestValidate:

    def test_reference_reconciles(self):
        ruleset = CashFlowRuleset()
        ruleset.validate(ruleset.calculate(_reference_batch()))

    def test_altered_ending_cash_rejected(self):
        ruleset = CashFlowRuleset()
        calculated = ruleset.calculate(_reference_batch())
        tampered = tuple(
            item if item.account_id != ENDING_CASH
            else type(item)(item.account_id, item.account_name, Decimal("450001"), item.period)
            for item in calculated
        )
        with pytest.raises(CashReconciliationError) as exc_info:
            ruleset.validate(tampered)
        error = exc_info.value
        assert error.computed == Decimal("450000")
        assert error.ending == Decimal("450001")
        assert error.discrepancy == Decimal("-1")
        assert error.code == "CASH_RECONCILIATION_FAILED"

    def test_within_tolerance_passes(self):
        ruleset = CashFlowRuleset()
        calculated = ruleset.calculate(_reference_batch())
        tampered = tuple(
            item if item.account_id != ENDING_CASH
            else type(item)(item.account_id, item.account_name, Decimal("450000.01"), item.period)
            for item in calculated
        )
        ruleset.validate(tampered)

    def test_missing_summary_rows(self):
        with pytest.raises(MissingLineItemError) as exc_info:
            CashFlowRuleset().validate(_reference_batch())
        assert exc_info.value.account_ids == (BEGINNING_CASH, NET_CHANGE, ENDING_CASH)


class TestFormat:

    def test_markers(self):
        ruleset = CashFlowRuleset()
        formatted = ruleset.format(ruleset.calculate(_reference_batch()))
        names = {i.account_id: i.account_name for i in formatted}
        assert names["CFO001"] == "[Operating] CFO001"
        assert names["CFI001"] == "[Investing] CFI001"
        assert names["CFF001"] == "[Financing] CFF001"
        assert names[BEGINNING_CASH] == "[Balance] Beginning Cash Balance"
        assert names[NET_CHANGE] == "[Balance] Net Change in Cash and Cash Equivalents"
        assert names[ENDING_CASH] == "[Balance] Ending Cash Balance"

    def test_format_is_relabel_only(self):
        ruleset = CashFlowRuleset()
        calculated = ruleset.calculate(_reference_batch())
        formatted = ruleset.format(calculated)
        assert formatted[0] == relabel(calculated[0], "[Operating] ")


class TestPipeline:

    def test_reference_report(self, deterministic_clock):
        result = generate(CashFlowRuleset(), PERIOD, clock=deterministic_clock)
        assert result.report_type == "CF (Cash Flow Statement)"
        assert len(result.data) == 6
        # 300,000 - 150,000 - 100,000 + 400,000 + 50,000 + 450,000
        assert result.metadata.total_value == Decimal("950000")
        assert find_item(result.data, ENDING_CASH).value == Decimal("450000")

    def test_injected_source_and_cash(self, deterministic_clock):
        ruleset = CashFlowRuleset(
            source=ListSource(make_items(CFO001=5, CFI001=-2)),
            beginning_cash=Decimal("10"),
        )
        result = generate(ruleset, "2025Q2", clock=deterministic_clock)
        assert value_of(result.data, ENDING_CASH) == Decimal("13")
        assert {i.period for i in result.data} == {"2025Q2"}
