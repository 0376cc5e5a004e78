"""
ReportPipeline -- fixed-stage driver for financial statement generation.

Responsibility:
    Runs any ``StatementRuleset`` through the same seven stages, in the
    same order, and assembles the ``ReportResult``:

        1. load_data        raw line items for the period
        2. before_calculate advisory hook
        3. calculate        raw items + derived items
        4. after_calculate  advisory hook
        5. validate         statement invariant, raises ValidationError
        6. format           presentation transform (names only)
        7. assemble         envelope + total_value

Architecture position:
    Kernel > Services -- imperative shell around the pure rule-set stages.
    The driver knows nothing about specific statement types.

Invariants enforced:
    - Stage order is fixed; no stage is skipped or repeated.
    - Hooks receive tuples and cannot change what later stages see.
    - ``calculate`` keeps the raw items as a prefix and stamps derived
      items with the batch period.
    - ``format`` preserves cardinality, account ids and values.
    - ``total_value`` is summed over the formatted items.

Failure modes:
    - ``ValidationError`` from stage 5 propagates unchanged; the
      calculated items are discarded.
    - ``StageContractError`` when a rule-set breaks the item contract
      above (a rule-set bug, not a data problem).

Audit relevance:
    Every run is logged with a ``run_id``, the report type and period,
    one record per completed stage, and the final total.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from uuid import uuid4

from statement_kernel.domain.clock import Clock, SystemClock
from statement_kernel.domain.line_items import LineItem, duplicate_account_ids
from statement_kernel.domain.report import ReportResult, assemble_report
from statement_kernel.domain.ruleset import StatementRuleset
from statement_kernel.exceptions import StageContractError, ValidationError
from statement_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.report_pipeline")


class PipelineStage(str, Enum):
    """Stages of a pipeline run, in execution order."""

    LOAD = "load"
    BEFORE_CALCULATE = "before_calculate"
    CALCULATE = "calculate"
    AFTER_CALCULATE = "after_calculate"
    VALIDATE = "validate"
    FORMAT = "format"
    ASSEMBLE = "assemble"


StageListener = Callable[[PipelineStage, tuple[LineItem, ...]], None]


class ReportPipeline:
    """
    Runs statement rule-sets through the fixed stage sequence.

    Contract:
        ``run(ruleset, period)`` returns a ``ReportResult`` or raises
        ``ValidationError`` from the rule-set's ``validate`` stage.

    Guarantees:
        - Clock is injectable for deterministic ``generated_at`` values.
        - ``stage_listener`` (if given) is called once per completed stage
          with the items that stage produced or inspected.
        - No state is kept between runs.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        stage_listener: StageListener | None = None,
    ):
        self._clock = clock or SystemClock()
        self._stage_listener = stage_listener

    def run(self, ruleset: StatementRuleset, period: str) -> ReportResult:
        report_type = ruleset.report_type()

        with LogContext.bind(
            run_id=str(uuid4()),
            report_type=report_type,
            period=period,
        ):
            logger.info("report_generation_started")

            raw = tuple(ruleset.load_data(period))
            self._completed(PipelineStage.LOAD, raw)

            ruleset.before_calculate(raw)
            self._completed(PipelineStage.BEFORE_CALCULATE, raw)

            calculated = tuple(ruleset.calculate(raw))
            self._check_calculated(report_type, raw, calculated)
            self._completed(PipelineStage.CALCULATE, calculated)

            ruleset.after_calculate(calculated)
            self._completed(PipelineStage.AFTER_CALCULATE, calculated)

            try:
                ruleset.validate(calculated)
            except ValidationError as exc:
                logger.warning(
                    "report_validation_failed",
                    extra={"error_code": exc.code, "reason": exc.reason},
                )
                raise
            self._completed(PipelineStage.VALIDATE, calculated)

            formatted = tuple(ruleset.format(calculated))
            self._check_formatted(report_type, calculated, formatted)
            self._completed(PipelineStage.FORMAT, formatted)

            result = assemble_report(report_type, period, formatted, self._clock)
            self._completed(PipelineStage.ASSEMBLE, result.data)

            logger.info(
                "report_generation_completed",
                extra={
                    "item_count": len(result.data),
                    "total_value": result.metadata.total_value,
                },
            )
            return result

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _completed(
        self,
        stage: PipelineStage,
        items: tuple[LineItem, ...],
    ) -> None:
        logger.debug(
            "pipeline_stage_completed",
            extra={"stage": stage.value, "item_count": len(items)},
        )
        if self._stage_listener is not None:
            self._stage_listener(stage, items)

    @staticmethod
    def _check_calculated(
        report_type: str,
        raw: tuple[LineItem, ...],
        calculated: tuple[LineItem, ...],
    ) -> None:
        stage = PipelineStage.CALCULATE.value
        if calculated[: len(raw)] != raw:
            raise StageContractError(
                report_type, stage, "did not preserve the raw line items",
            )
        # An empty load leaves derived lines without a batch period to match.
        batch = raw[0].period if raw else None
        for item in calculated[len(raw):]:
            if batch is not None and item.period != batch:
                raise StageContractError(
                    report_type,
                    stage,
                    f"derived '{item.account_id}' for period '{item.period}', "
                    f"expected '{batch}'",
                )
        dupes = duplicate_account_ids(calculated)
        if dupes:
            raise StageContractError(
                report_type, stage, f"produced duplicate account ids: {', '.join(dupes)}",
            )

    @staticmethod
    def _check_formatted(
        report_type: str,
        calculated: tuple[LineItem, ...],
        formatted: tuple[LineItem, ...],
    ) -> None:
        stage = PipelineStage.FORMAT.value
        if len(formatted) != len(calculated):
            raise StageContractError(
                report_type,
                stage,
                f"changed the number of line items ({len(calculated)} -> {len(formatted)})",
            )
        for before, after in zip(calculated, formatted):
            if (
                before.account_id != after.account_id
                or before.value != after.value
                or before.period != after.period
            ):
                raise StageContractError(
                    report_type,
                    stage,
                    f"altered line item '{before.account_id}'",
                )


def generate(
    ruleset: StatementRuleset,
    period: str,
    *,
    clock: Clock | None = None,
) -> ReportResult:
    """Run ``ruleset`` for ``period`` through a fresh pipeline."""
    return ReportPipeline(clock=clock).run(ruleset, period)
