"""Services for the statement kernel."""

from statement_kernel.services.report_pipeline import (
    PipelineStage,
    ReportPipeline,
    StageListener,
    generate,
)

__all__ = [
    "PipelineStage",
    "ReportPipeline",
    "StageListener",
    "generate",
]
