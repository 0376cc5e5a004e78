"""
Tests for ReportingService.

The service is thin glue over the pipeline, so these tests check the
registry, dispatch by report type, and batch failure handling.
"""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from statement_kernel.domain.line_items import batch_period, derive, relabel, sum_values, value_of
from statement_kernel.domain.ruleset import NoOpCalculationHooks
from statement_kernel.exceptions import (
    DuplicateRulesetError,
    NonPositiveRevenueError,
    UnbalancedBalanceSheetError,
    UnknownReportTypeError,
)
from statement_modules.reporting.cash_flow import ENDING_CASH, CashFlowRuleset
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import BatchResult, FailurePolicy, ReportType
from statement_modules.reporting.profit_loss import NET_INCOME
from statement_modules.reporting.service import ReportingService
from tests.conftest import FIXED_TIME, PERIOD, ListSource, make_items


@pytest.fixture
def service(deterministic_clock, reporting_config):
    return ReportingService(config=reporting_config, clock=deterministic_clock)


@pytest.fixture
def unbalanced_service(deterministic_clock, reporting_config):
    sources = {ReportType.BALANCE_SHEET: ListSource(make_items(ASSET001=100, LIAB001=-10))}
    return ReportingService(config=reporting_config, clock=deterministic_clock, sources=sources)


class TestRegistry:

    def test_default_report_types(self, service):
        assert service.report_types == (
            ReportType.PROFIT_AND_LOSS,
            ReportType.BALANCE_SHEET,
            ReportType.CASH_FLOW,
        )

    def test_lookup_by_value(self, service):
        assert service.ruleset_for("cash_flow") is service.ruleset_for(ReportType.CASH_FLOW)

    def test_unknown_report_type(self, service):
        with pytest.raises(UnknownReportTypeError) as exc_info:
            service.ruleset_for("trial_balance")
        assert exc_info.value.report_type == "trial_balance"
        assert exc_info.value.code == "UNKNOWN_REPORT_TYPE"

    def test_duplicate_registration_rejected(self, service):
        with pytest.raises(DuplicateRulesetError):
            service.register(ReportType.CASH_FLOW, CashFlowRuleset())

    def test_replace_registration(self, service):
        replacement = CashFlowRuleset(beginning_cash=Decimal("0"))
        service.register(ReportType.CASH_FLOW, replacement, replace=True)
        assert service.ruleset_for(ReportType.CASH_FLOW) is replacement
        result = service.generate(ReportType.CASH_FLOW, PERIOD)
        assert value_of(result.data, ENDING_CASH) == Decimal("50000")

    def test_string_key_names_builtin_type(self, service):
        with pytest.raises(DuplicateRulesetError):
            service.register("cash_flow", CashFlowRuleset())
        replacement = CashFlowRuleset()
        service.register("cash_flow", replacement, replace=True)
        assert service.ruleset_for(ReportType.CASH_FLOW) is replacement
        assert len(service.report_types) == 3


class RetainedEarningsRuleset(NoOpCalculationHooks):
    """Statement type not known to the service: opening + net income - dividends."""

    def __init__(self, source):
        self._source = source

    def report_type(self) -> str:
        return "RE (Retained Earnings)"

    def load_data(self, period):
        return self._source.load(period)

    def calculate(self, items):
        closing = sum_values(items)
        return items + (derive("RE_END", "Closing Retained Earnings", closing, batch_period(items) or ""),)

    def validate(self, items):
        return None

    def format(self, items):
        return tuple(relabel(i, "[Equity] ") for i in items)


class TestNewReportType:

    @pytest.fixture
    def extended(self, service):
        source = ListSource(make_items(RE_OPEN=600000, NI001=150000, DIV001=-50000))
        service.register("retained_earnings", RetainedEarningsRuleset(source))
        return service

    def test_registered_after_builtins(self, extended):
        assert extended.report_types[-1] == "retained_earnings"
        assert len(extended.report_types) == 4

    def test_generate(self, extended):
        result = extended.generate("retained_earnings", PERIOD)
        assert result.report_type == "RE (Retained Earnings)"
        assert value_of(result.data, "RE_END") == Decimal("700000")
        assert result.data[-1].account_name == "[Equity] Closing Retained Earnings"

    def test_included_in_default_batch(self, extended):
        batch = extended.generate_batch(PERIOD)
        assert len(batch.reports) == 4
        assert batch.report_for("RE (Retained Earnings)") is not None

    def test_duplicate_rejected(self, extended):
        with pytest.raises(DuplicateRulesetError) as exc_info:
            extended.register("retained_earnings", CashFlowRuleset())
        assert exc_info.value.report_type == "retained_earnings"

    def test_rejected_registration_leaves_registry_unchanged(self, service):
        before = service.report_types
        with pytest.raises(TypeError):
            service.register("not_a_ruleset", object())
        with pytest.raises(ValueError):
            service.register("", CashFlowRuleset())
        assert service.report_types == before
        with pytest.raises(UnknownReportTypeError):
            service.ruleset_for("not_a_ruleset")


class TestGenerate:

    def test_profit_and_loss(self, service):
        result = service.generate(ReportType.PROFIT_AND_LOSS, PERIOD)
        assert result.report_type == "PL (Profit and Loss Statement)"
        assert value_of(result.data, NET_INCOME) == Decimal("150000")
        assert result.metadata.generated_at == FIXED_TIME

    def test_string_report_type(self, service):
        result = service.generate("balance_sheet", PERIOD)
        assert result.report_type == "BS (Balance Sheet)"

    def test_unknown_report_type(self, service):
        with pytest.raises(UnknownReportTypeError):
            service.generate("equity_changes", PERIOD)

    def test_injected_source(self, deterministic_clock):
        service = ReportingService(
            clock=deterministic_clock,
            sources={ReportType.PROFIT_AND_LOSS: ListSource(make_items(REV001=0))},
        )
        with pytest.raises(NonPositiveRevenueError):
            service.generate(ReportType.PROFIT_AND_LOSS, PERIOD)

    def test_config_reaches_rulesets(self, deterministic_clock):
        service = ReportingService(
            config=ReportingConfig(beginning_cash=Decimal("1000")),
            clock=deterministic_clock,
        )
        result = service.generate(ReportType.CASH_FLOW, PERIOD)
        assert value_of(result.data, ENDING_CASH) == Decimal("51000")


class TestGenerateBatch:

    def test_all_statements(self, service):
        batch = service.generate_batch(PERIOD)
        assert isinstance(batch, BatchResult)
        assert batch.succeeded
        assert batch.period == PERIOD
        assert [r.report_type for r in batch.reports] == [
            "PL (Profit and Loss Statement)",
            "BS (Balance Sheet)",
            "CF (Cash Flow Statement)",
        ]

    def test_selected_statements_in_given_order(self, service):
        batch = service.generate_batch(PERIOD, ["cash_flow", ReportType.PROFIT_AND_LOSS])
        assert [r.report_type for r in batch.reports] == [
            "CF (Cash Flow Statement)",
            "PL (Profit and Loss Statement)",
        ]

    def test_report_for(self, service):
        batch = service.generate_batch(PERIOD)
        assert batch.report_for(ReportType.BALANCE_SHEET).report_type == "BS (Balance Sheet)"

    def test_report_for_missing(self, service):
        batch = service.generate_batch(PERIOD, [ReportType.CASH_FLOW])
        assert batch.report_for(ReportType.BALANCE_SHEET) is None

    def test_abort_policy_raises(self, unbalanced_service):
        with pytest.raises(UnbalancedBalanceSheetError):
            unbalanced_service.generate_batch(PERIOD)

    def test_skip_policy_records_failure(self, unbalanced_service):
        batch = unbalanced_service.generate_batch(PERIOD, on_failure=FailurePolicy.SKIP)
        assert not batch.succeeded
        assert len(batch.reports) == 2
        ((failed_type, error),) = batch.failures
        assert failed_type == "balance_sheet"
        assert isinstance(error, UnbalancedBalanceSheetError)
        assert batch.report_for(ReportType.CASH_FLOW) is not None

    def test_unknown_type_rejected_before_running(self, service):
        with pytest.raises(UnknownReportTypeError):
            service.generate_batch(PERIOD, ["profit_and_loss", "bogus"])

    def test_batch_logging(self, unbalanced_service, caplog):
        with caplog.at_level(logging.INFO, logger="statement_kernel"):
            unbalanced_service.generate_batch(PERIOD, on_failure=FailurePolicy.SKIP)
        messages = [r.getMessage() for r in caplog.records]
        assert "report_batch_started" in messages
        assert "report_skipped_after_validation_failure" in messages
        assert "report_batch_completed" in messages
        completed = next(r for r in caplog.records if r.getMessage() == "report_batch_completed")
        assert completed.report_count == 2
        assert completed.failure_count == 1
