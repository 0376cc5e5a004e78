"""
Report renderers and exporters.

``render_to_dict`` turns any report dataclass into plain JSON-ready data.
Exporters are the collaborators that receive finished ``ReportResult``
objects; two stream-based ones are provided (JSON lines and a fixed-width
text statement).
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Protocol, TextIO, runtime_checkable

from statement_kernel.domain.report import ReportResult
from statement_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.render")


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - datetime/date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


@runtime_checkable
class ReportExporter(Protocol):
    """Receives finished reports."""

    def export(self, result: ReportResult) -> None:
        ...


class JsonReportExporter:
    """Writes each report as one JSON document per line."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def export(self, result: ReportResult) -> None:
        self._stream.write(json.dumps(render_to_dict(result), ensure_ascii=False))
        self._stream.write("\n")
        logger.debug(
            "report_exported",
            extra={"exporter": "json", "item_count": len(result.data)},
        )


W = 72  # total line width
AMT_W = 18  # amount column width


def format_amount(value: Decimal, precision: int = 2) -> str:
    """Format a Decimal as $1,234.56, negatives in parentheses."""
    formatted = f"${abs(value):,.{precision}f}"
    return f"({formatted})" if value < 0 else f" {formatted} "


class TextReportExporter:
    """Writes a fixed-width, human-readable statement."""

    def __init__(self, stream: TextIO, precision: int = 2):
        self._stream = stream
        self._precision = precision

    def render(self, result: ReportResult) -> str:
        lines = [
            "=" * W,
            result.report_type.center(W).rstrip(),
            result.period.center(W).rstrip(),
            "=" * W,
        ]
        for item in result.data:
            lines.append(self._row(item.account_name, item.value))
        lines.append(f"  {'':<{W - AMT_W - 2}}{'-' * AMT_W:>{AMT_W}}")
        lines.append(self._row("TOTAL", result.metadata.total_value))
        lines.append(f"  Generated at {result.metadata.generated_at.isoformat()}")
        return "\n".join(lines) + "\n"

    def export(self, result: ReportResult) -> None:
        self._stream.write(self.render(result))
        logger.debug(
            "report_exported",
            extra={"exporter": "text", "item_count": len(result.data)},
        )

    def _row(self, label: str, amount: Decimal) -> str:
        return (
            f"  {label:<{W - AMT_W - 2}}"
            f"{format_amount(amount, self._precision):>{AMT_W}}"
        )
