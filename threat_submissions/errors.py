"""Exception hierarchy for the threat submission report."""

from __future__ import annotations

from typing import Any


class SubmissionReportError(Exception):
    """Base class for every error raised by this package."""


class GraphConnectionError(SubmissionReportError):
    """The Graph session could not be established; nothing was retrieved."""


class GraphRequestError(SubmissionReportError):
    """A single Graph request failed (HTTP status, transport, or bad JSON)."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RetrievalError(SubmissionReportError):
    """Pagination stopped on a failed page.

    ``records`` holds everything accumulated before the failure so the
    caller can still export it.  The underlying :class:`GraphRequestError`
    is available as ``__cause__``.
    """

    def __init__(self, message: str, *, records: list[Any]) -> None:
        super().__init__(message)
        self.records = records


class MailboxLookupError(SubmissionReportError):
    """Mailbox search response could not be interpreted.

    Never escapes :class:`~threat_submissions.mailbox.MailboxLookupClient`.
    """


class ExportError(SubmissionReportError):
    """An export artifact could not be written."""
