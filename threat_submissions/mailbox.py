"""Message-ID recovery against the recipient's mailbox.

Best-effort heuristic: the first message from the sender, received within
the lookup window, whose subject matches exactly, is taken to be the
reported one.  Several messages sharing sender, window and subject are
indistinguishable and the first returned wins.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from urllib.parse import quote

import structlog

from .config import GraphConfig
from .errors import GraphRequestError, MailboxLookupError
from .filters import odata_datetime, odata_quote
from .graph_client import GraphClient

logger = structlog.get_logger()


def parse_graph_datetime(value: str) -> datetime:
    """Parse a Graph ISO 8601 timestamp (``Z`` suffix, up to 7 fractional digits)."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # Graph emits 100ns precision; fromisoformat accepts at most microseconds
    if "." in text:
        head, _, tail = text.partition(".")
        digits = ""
        while tail and tail[0].isdigit():
            digits, tail = digits + tail[0], tail[1:]
        text = f"{head}.{digits[:6].ljust(6, '0')}{tail}"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        raise ValueError(f"Timestamp without UTC offset: {value!r}")
    return dt


class MailboxLookupClient:
    """Wraps one time-windowed, sender-filtered mailbox message query."""

    def __init__(self, graph: GraphClient, config: GraphConfig) -> None:
        self._graph = graph
        self._window = timedelta(minutes=config.lookup_window_minutes)
        self._top = config.lookup_max_candidates

    def build_filter(self, counterparty_address: str, anchor: datetime) -> str:
        start = odata_datetime(anchor - self._window)
        end = odata_datetime(anchor + self._window)
        return (
            f"from/emailAddress/address eq {odata_quote(counterparty_address)}"
            f" and receivedDateTime ge {start}"
            f" and receivedDateTime le {end}"
        )

    def lookup(
        self,
        mailbox_owner: str,
        counterparty_address: str,
        subject: str,
        anchor_timestamp: str,
    ) -> str | None:
        """Return the ``internetMessageId`` of the best match, or ``None``.

        Never raises: any failure is logged and reported as no match.
        """
        try:
            return self._lookup(mailbox_owner, counterparty_address, subject, anchor_timestamp)
        except (GraphRequestError, MailboxLookupError) as exc:
            logger.debug(
                "mailbox_lookup_failed",
                mailbox=mailbox_owner,
                sender=counterparty_address,
                error=str(exc),
                status_code=getattr(exc, "status_code", None),
            )
            return None

    def _lookup(
        self,
        mailbox_owner: str,
        counterparty_address: str,
        subject: str,
        anchor_timestamp: str,
    ) -> str | None:
        try:
            anchor = parse_graph_datetime(anchor_timestamp)
        except ValueError as exc:
            raise MailboxLookupError(f"Unusable anchor timestamp {anchor_timestamp!r}") from exc
        try:
            expression = self.build_filter(counterparty_address, anchor)
        except OverflowError as exc:
            raise MailboxLookupError(
                f"Lookup window around {anchor_timestamp!r} is out of range"
            ) from exc

        body = self._graph.get_json(
            f"/users/{quote(mailbox_owner, safe='@')}/messages",
            params={
                "$filter": expression,
                "$select": "internetMessageId,subject",
                "$top": self._top,
            },
        )
        candidates = body.get("value")
        if not isinstance(candidates, list):
            raise MailboxLookupError("Mailbox response has no 'value' list")

        match = _first_subject_match(candidates, subject)
        if match is None:
            logger.debug(
                "mailbox_lookup_no_match",
                mailbox=mailbox_owner,
                sender=counterparty_address,
                candidates=len(candidates),
            )
        return match


def _first_subject_match(candidates: list[Any], subject: str) -> str | None:
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        if candidate.get("subject") == subject:
            message_id = candidate.get("internetMessageId")
            if isinstance(message_id, str) and message_id:
                return message_id
    return None
