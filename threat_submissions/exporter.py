"""Export the ordered record set as CSV, JSON and a self-contained HTML report."""

from __future__ import annotations

import csv
import json
from datetime import UTC, datetime
from pathlib import Path

import structlog

from .errors import ExportError
from .html_report import render_html_report
from .models import CanonicalRecord
from .summary import SubmissionSummary, summarize

logger = structlog.get_logger()

FILE_STEM = "ThreatSubmissions"


class ReportExporter:
    """Writes export artifacts into *output_dir*.

    All artifacts from one run share a UTC timestamp in their file name.
    Identifier provenance prefixes are written verbatim.
    """

    def __init__(self, output_dir: str | Path, *, timestamp: datetime | None = None) -> None:
        self._output_dir = Path(output_dir)
        self._timestamp = (timestamp or datetime.now(UTC)).astimezone(UTC)

    def path_for(self, suffix: str) -> Path:
        stamp = self._timestamp.strftime("%Y%m%dT%H%M%SZ")
        return self._output_dir / f"{FILE_STEM}_{stamp}.{suffix}"

    def write_csv(self, records: list[CanonicalRecord]) -> Path:
        path = self.path_for("csv")
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="") as fh:
                writer = csv.DictWriter(fh, fieldnames=CanonicalRecord.export_columns())
                writer.writeheader()
                for record in records:
                    writer.writerow(record.to_export_row())
        except OSError as exc:
            raise ExportError(f"Could not write CSV export {path}: {exc}") from exc
        logger.info("csv_exported", path=str(path), rows=len(records))
        return path

    def write_json(self, records: list[CanonicalRecord]) -> Path:
        path = self.path_for("json")
        rows = [record.to_export_row() for record in records]
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise ExportError(f"Could not write JSON export {path}: {exc}") from exc
        logger.info("json_exported", path=str(path), rows=len(records))
        return path

    def write_html(
        self,
        records: list[CanonicalRecord],
        *,
        summary: SubmissionSummary | None = None,
        filter_expression: str = "",
    ) -> Path:
        path = self.path_for("html")
        document = render_html_report(
            records,
            summary or summarize(records),
            generated_at=self._timestamp,
            filter_expression=filter_expression,
        )
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(document, encoding="utf-8")
        except OSError as exc:
            raise ExportError(f"Could not write HTML report {path}: {exc}") from exc
        logger.info("html_exported", path=str(path), rows=len(records))
        return path
