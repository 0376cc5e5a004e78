"""
Reporting Module Service (``statement_modules.reporting.service``).

Responsibility
--------------
Single entry point for statement generation.  Holds the registry of
statement rule-sets keyed by ``ReportType`` and runs them through the
kernel ``ReportPipeline``, one statement or a batch at a time.

Architecture position
---------------------
**Modules layer** -- thin glue.  No financial logic lives here: the
arithmetic and checks are in the rule-sets, the stage order in the
pipeline.  Constructor: ``config`` + ``clock`` + optional ``sources``.

Failure modes
-------------
* Unregistered report type -> ``UnknownReportTypeError``.
* Registering a type twice without ``replace=True`` -> ``DuplicateRulesetError``.
* Statement validation failure -> ``ValidationError`` propagates from
  ``generate``; ``generate_batch`` aborts or skips per ``FailurePolicy``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from uuid import uuid4

from statement_kernel.domain.clock import Clock, SystemClock
from statement_kernel.domain.report import ReportResult
from statement_kernel.domain.ruleset import StatementRuleset
from statement_kernel.exceptions import (
    DuplicateRulesetError,
    UnknownReportTypeError,
    ValidationError,
)
from statement_kernel.logging_config import LogContext, get_logger
from statement_kernel.services.report_pipeline import ReportPipeline
from statement_modules.reporting.balance_sheet import BalanceSheetRuleset
from statement_modules.reporting.cash_flow import CashFlowRuleset
from statement_modules.reporting.config import ReportingConfig
from statement_modules.reporting.models import BatchResult, FailurePolicy, ReportType
from statement_modules.reporting.profit_loss import ProfitAndLossRuleset
from statement_modules.reporting.sources import LineItemSource

logger = get_logger("modules.reporting.service")


def _report_key(value: ReportType | str) -> str:
    """Registry key: the enum value for built-in types, the string otherwise."""
    if isinstance(value, ReportType):
        return value.value
    return str(value)


def build_default_rulesets(
    config: ReportingConfig,
    sources: Mapping[ReportType, LineItemSource] | None = None,
) -> dict[str, StatementRuleset]:
    """Create the standard rule-set for each statement type."""
    sources = sources or {}
    return {
        ReportType.PROFIT_AND_LOSS.value: ProfitAndLossRuleset(
            source=sources.get(ReportType.PROFIT_AND_LOSS), config=config,
        ),
        ReportType.BALANCE_SHEET.value: BalanceSheetRuleset(
            source=sources.get(ReportType.BALANCE_SHEET), config=config,
        ),
        ReportType.CASH_FLOW.value: CashFlowRuleset(
            source=sources.get(ReportType.CASH_FLOW), config=config,
        ),
    }


class ReportingService:
    """
    Financial statement generation service.

    Contract
    --------
    * ``generate`` returns a ``ReportResult`` or raises the rule-set's
      ``ValidationError``.
    * ``generate_batch`` returns a ``BatchResult``.
    * Report types are keyed by string: a ``ReportType`` member and its
      value name the same entry, and ``register`` accepts new names.

    Guarantees
    ----------
    * Clock is injectable for deterministic testing.
    * Registry changes never affect runs already completed.
    * A rejected ``register`` call leaves the registry unchanged.
    """

    def __init__(
        self,
        config: ReportingConfig | None = None,
        clock: Clock | None = None,
        sources: Mapping[ReportType, LineItemSource] | None = None,
    ):
        self._config = config or ReportingConfig.with_defaults()
        self._pipeline = ReportPipeline(clock=clock or SystemClock())
        self._rulesets = build_default_rulesets(self._config, sources)

        logger.info(
            "reporting_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "report_types": list(self._rulesets),
            },
        )

    @property
    def report_types(self) -> tuple[str, ...]:
        """Registered report types, in registration order."""
        return tuple(self._rulesets)

    def register(
        self,
        report_type: ReportType | str,
        ruleset: StatementRuleset,
        *,
        replace: bool = False,
    ) -> None:
        """
        Register ``ruleset`` under ``report_type``.

        Raises:
            ValueError: if ``report_type`` is empty.
            TypeError: if ``ruleset`` does not implement ``StatementRuleset``.
            DuplicateRulesetError: if the type is taken and ``replace`` is False.
        """
        key = _report_key(report_type)
        if not key:
            raise ValueError("report_type cannot be empty")
        if not isinstance(ruleset, StatementRuleset):
            raise TypeError(
                f"{type(ruleset).__name__} does not implement StatementRuleset"
            )
        if key in self._rulesets and not replace:
            raise DuplicateRulesetError(key)

        self._rulesets[key] = ruleset
        logger.info(
            "ruleset_registered",
            extra={"registered_type": key, "replaced": replace},
        )

    def ruleset_for(self, report_type: ReportType | str) -> StatementRuleset:
        key = _report_key(report_type)
        ruleset = self._rulesets.get(key)
        if ruleset is None:
            raise UnknownReportTypeError(key)
        return ruleset

    def generate(self, report_type: ReportType | str, period: str) -> ReportResult:
        """Generate one statement for ``period``."""
        return self._pipeline.run(self.ruleset_for(report_type), period)

    def generate_batch(
        self,
        period: str,
        report_types: Iterable[ReportType | str] | None = None,
        *,
        on_failure: FailurePolicy = FailurePolicy.ABORT,
    ) -> BatchResult:
        """
        Generate several statements for the same period.

        Statements run in the order given (default: registration order).
        Under ``FailurePolicy.ABORT`` the first ``ValidationError`` is
        re-raised; under ``SKIP`` it is recorded and the batch continues.
        """
        # Unknown types fail here, before any statement runs.
        plan = [
            (_report_key(t), self.ruleset_for(t))
            for t in (report_types if report_types is not None else self._rulesets)
        ]
        reports: list[ReportResult] = []
        failures: list[tuple[str, ValidationError]] = []

        with LogContext.bind(batch_id=str(uuid4())):
            logger.info(
                "report_batch_started",
                extra={
                    "batch_period": period,
                    "report_types": [key for key, _ in plan],
                    "on_failure": on_failure.value,
                },
            )
            for key, ruleset in plan:
                try:
                    reports.append(self._pipeline.run(ruleset, period))
                except ValidationError as exc:
                    if on_failure is FailurePolicy.ABORT:
                        logger.error(
                            "report_batch_aborted",
                            extra={"failed_report_type": key},
                        )
                        raise
                    logger.warning(
                        "report_skipped_after_validation_failure",
                        extra={
                            "failed_report_type": key,
                            "error_code": exc.code,
                        },
                    )
                    failures.append((key, exc))

            logger.info(
                "report_batch_completed",
                extra={
                    "report_count": len(reports),
                    "failure_count": len(failures),
                },
            )

        return BatchResult(
            period=period,
            reports=tuple(reports),
            failures=tuple(failures),
        )
