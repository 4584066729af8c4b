"""Report run orchestration: fetch, normalize, sort."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from .config import ReportConfig
from .errors import RetrievalError
from .filters import build_submission_filter
from .graph_client import GraphClient
from .identifiers import IdentifierResolver
from .mailbox import MailboxLookupClient, parse_graph_datetime
from .models import CanonicalRecord
from .normalizer import SubmissionNormalizer
from .retriever import SubmissionRetriever

logger = structlog.get_logger()

_OLDEST = datetime.min.replace(tzinfo=UTC)


@dataclass
class ReportResult:
    """Outcome of a run: records newest first, plus the retrieval error if pagination aborted."""

    records: list[CanonicalRecord]
    filter_expression: str
    error: RetrievalError | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


def _created_key(record: CanonicalRecord) -> datetime:
    try:
        return parse_graph_datetime(record.created_date_time)
    except ValueError:
        return _OLDEST


def sort_newest_first(records: list[CanonicalRecord]) -> list[CanonicalRecord]:
    """Order by creation time descending; unparsable timestamps go last."""
    return sorted(records, key=_created_key, reverse=True)


class SubmissionReport:
    """Wires the retriever, normalizer, resolver and mailbox lookup together."""

    def __init__(
        self,
        config: ReportConfig,
        graph: GraphClient,
        *,
        on_progress: Callable[[int], None] | None = None,
    ) -> None:
        self._config = config
        lookup = MailboxLookupClient(graph, config.graph)
        self._normalizer = SubmissionNormalizer(IdentifierResolver(lookup))
        self._retriever = SubmissionRetriever(
            graph,
            page_size=config.graph.page_size,
            on_progress=on_progress,
        )

    def filter_expression(self, now: datetime | None = None) -> str:
        return build_submission_filter(
            self._config.days_back,
            category=self._config.category,
            include_admin_submissions=self._config.include_admin_submissions,
            now=now,
        )

    def run(self, now: datetime | None = None) -> ReportResult:
        expression = self.filter_expression(now)
        try:
            records = self._retriever.fetch_all(expression, self._normalizer.normalize)
        except RetrievalError as exc:
            logger.warning("report_partial", records=len(exc.records))
            return ReportResult(sort_newest_first(exc.records), expression, error=exc)
        return ReportResult(sort_newest_first(records), expression)
