"""Pagination driver for the emailThreats submissions list."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from .errors import GraphRequestError, RetrievalError
from .graph_client import GraphClient
from .models import RawSubmission

logger = structlog.get_logger()

T = TypeVar("T")

SUBMISSIONS_PATH = "/security/threatSubmission/emailThreats"
NEXT_LINK_KEY = "@odata.nextLink"


class SubmissionRetriever:
    """Follows ``@odata.nextLink`` until the listing is exhausted.

    Each page is requested exactly once.  A failed page ends pagination
    with :class:`RetrievalError`, which carries the records accumulated
    so far.
    """

    def __init__(
        self,
        graph: GraphClient,
        *,
        page_size: int = 100,
        on_progress: Callable[[int], None] | None = None,
    ) -> None:
        self._graph = graph
        self._page_size = page_size
        self._on_progress = on_progress

    def fetch_all(
        self,
        filter_expression: str,
        transform: Callable[[RawSubmission], T] | None = None,
    ) -> list[T]:
        """Fetch every page matching *filter_expression*.

        *transform* is applied to each raw record as it arrives (the
        normalizer, in a report run); without it raw dicts are returned.
        """
        records: list[Any] = []
        url: str | None = SUBMISSIONS_PATH
        params: dict[str, Any] | None = {
            "$filter": filter_expression,
            "$top": self._page_size,
        }
        pages = 0

        logger.info("submissions_fetch_started", filter=filter_expression)
        while url:
            try:
                body = self._graph.get_json(url, params=params)
                page = _page_items(body, url)
            except GraphRequestError as exc:
                logger.error(
                    "submissions_page_failed",
                    page=pages + 1,
                    accumulated=len(records),
                    status_code=exc.status_code,
                    error=str(exc),
                )
                raise RetrievalError(
                    f"Retrieval stopped at page {pages + 1}: {exc}",
                    records=records,
                ) from exc

            for raw in page:
                records.append(transform(raw) if transform else raw)
            pages += 1

            # The continuation link already carries every query parameter
            url = body.get(NEXT_LINK_KEY) or None
            params = None

            logger.info("submissions_page_fetched", page=pages, count=len(records))
            if self._on_progress is not None:
                self._on_progress(len(records))

        logger.info("submissions_fetch_complete", pages=pages, count=len(records))
        return records


def _page_items(body: dict[str, Any], url: str) -> list[RawSubmission]:
    """Return the page's ``value`` list; a malformed envelope fails the whole page."""
    items = body.get("value")
    if items is None:
        return []
    if not isinstance(items, list):
        raise GraphRequestError(
            f"Page 'value' is a {type(items).__name__}, expected a list", url=url
        )
    if not all(isinstance(item, dict) for item in items):
        raise GraphRequestError("Page 'value' contains non-object entries", url=url)
    return items
