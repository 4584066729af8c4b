"""User-reported email threat submission report.

Public API re-exported here for convenience::

    from threat_submissions import GraphClient, ReportConfig, SubmissionReport
"""

from .config import GraphConfig, ReportConfig, RetryConfig
from .errors import (
    ExportError,
    GraphConnectionError,
    GraphRequestError,
    MailboxLookupError,
    RetrievalError,
    SubmissionReportError,
)
from .exporter import ReportExporter
from .filters import build_submission_filter
from .graph_client import GraphClient
from .identifiers import IdentifierProvenance, IdentifierResolver, ResolvedIdentifier
from .logging import bind_run_context, setup_logging
from .mailbox import MailboxLookupClient
from .models import CanonicalRecord, RawSubmission, SubmissionCategory, SubmissionSource
from .normalizer import SubmissionNormalizer
from .pipeline import ReportResult, SubmissionReport, sort_newest_first
from .retriever import SubmissionRetriever
from .summary import SubmissionSummary, summarize

__all__ = [
    "CanonicalRecord",
    "ExportError",
    "GraphClient",
    "GraphConfig",
    "GraphConnectionError",
    "GraphRequestError",
    "IdentifierProvenance",
    "IdentifierResolver",
    "MailboxLookupClient",
    "MailboxLookupError",
    "RawSubmission",
    "ReportConfig",
    "ReportExporter",
    "ReportResult",
    "RetrievalError",
    "RetryConfig",
    "ResolvedIdentifier",
    "SubmissionCategory",
    "SubmissionNormalizer",
    "SubmissionReport",
    "SubmissionReportError",
    "SubmissionRetriever",
    "SubmissionSource",
    "SubmissionSummary",
    "bind_run_context",
    "build_submission_filter",
    "setup_logging",
    "sort_newest_first",
    "summarize",
]
