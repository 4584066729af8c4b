"""Command-line entry point for the threat submission report."""

from __future__ import annotations

import argparse
import sys

import structlog
from pydantic import ValidationError

from .config import ReportConfig
from .errors import ExportError, GraphConnectionError
from .exporter import ReportExporter
from .graph_client import GraphClient
from .logging import bind_run_context, setup_logging
from .models import SubmissionCategory
from .pipeline import SubmissionReport
from .summary import summarize

logger = structlog.get_logger()

NO_RESULTS_HINT = (
    "No submissions matched. If users are reporting messages, check that the "
    "tenant's user reported settings send reports to Microsoft and that the "
    "lookback window covers the reports."
)


def report_progress(count: int) -> None:
    """Running total on stderr, one line per fetched page."""
    print(f"[progress] retrieved {count} submissions", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="threat-submissions",
        description=(
            "Export user-reported email threat submissions from Microsoft Graph "
            "as CSV/JSON and, optionally, an interactive HTML report."
        ),
    )
    parser.add_argument(
        "-d", "--days-back", type=int, default=None,
        help="Number of days to look back. Default: 180",
    )
    parser.add_argument(
        "-c", "--category", default=None,
        choices=[c.value for c in SubmissionCategory],
        help="Only report submissions of this category.",
    )
    parser.add_argument(
        "--include-admin-submissions", action="store_true", default=None,
        help="Also report submissions made by administrators.",
    )
    parser.add_argument(
        "--export-html", action="store_true", default=None,
        help="Write the interactive HTML report next to the CSV/JSON exports.",
    )
    parser.add_argument(
        "-o", "--output-dir", default=None,
        help="Directory for exported files. Default: current directory",
    )
    parser.add_argument("--log-level", default=None, help="Log level. Default: INFO")
    parser.add_argument(
        "--log-json", action="store_true", default=None,
        help="Emit JSON log lines instead of console output.",
    )
    return parser


def load_config(args: argparse.Namespace) -> ReportConfig:
    """Environment first, command-line flags on top."""
    overrides = {
        "days_back": args.days_back,
        "category": args.category,
        "include_admin_submissions": args.include_admin_submissions,
        "export_html": args.export_html,
        "output_dir": args.output_dir,
        "log_level": args.log_level,
        "log_json": args.log_json,
    }
    return ReportConfig(**{k: v for k, v in overrides.items() if v is not None})


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ValidationError as exc:
        print(f"[error] invalid configuration:\n{exc}", file=sys.stderr)
        return 1

    setup_logging(json=config.log_json, level=config.log_level)
    bind_run_context(
        days_back=config.days_back,
        category=config.category.value if config.category else None,
        include_admin_submissions=config.include_admin_submissions,
    )

    graph = GraphClient(config.graph, config.retry)
    try:
        graph.connect()
    except GraphConnectionError as exc:
        graph.close()
        logger.error("graph_connection_failed", error=str(exc))
        print(f"[error] {exc}", file=sys.stderr)
        return 1

    try:
        result = SubmissionReport(config, graph, on_progress=report_progress).run()
    finally:
        graph.close()

    summary = summarize(result.records)
    print("\n".join(summary.format_lines()))

    if result.error is not None:
        print(
            f"[error] retrieval aborted: {result.error}. "
            f"Exporting the {len(result.records)} submissions retrieved before the failure.",
            file=sys.stderr,
        )

    if not result.records:
        if result.complete:
            logger.warning("no_submissions_found", filter=result.filter_expression)
            print(f"[warning] {NO_RESULTS_HINT}", file=sys.stderr)
    else:
        exporter = ReportExporter(config.output_dir)
        for write in (exporter.write_csv, exporter.write_json):
            try:
                print(f"[success] wrote {write(result.records)}")
            except ExportError as exc:
                logger.warning("export_failed", error=str(exc))
        if config.export_html:
            try:
                path = exporter.write_html(
                    result.records,
                    summary=summary,
                    filter_expression=result.filter_expression,
                )
                print(f"[success] wrote {path}")
            except ExportError as exc:
                logger.warning("export_failed", error=str(exc))

    return 0 if result.complete else 1


def main() -> None:
    sys.exit(run())
