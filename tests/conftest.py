"""Shared test fixtures for the threat submission test suite."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx
import pytest

from threat_submissions.config import GraphConfig, ReportConfig, RetryConfig
from threat_submissions.graph_client import GraphClient

GRAPH_BASE = "https://graph.test/beta"
SUBMISSIONS_URL = f"{GRAPH_BASE}/security/threatSubmission/emailThreats"
ORGANIZATION_URL = f"{GRAPH_BASE}/organization"


def messages_url(mailbox: str) -> str:
    return f"{GRAPH_BASE}/users/{mailbox}/messages"


@pytest.fixture
def graph_config() -> GraphConfig:
    return GraphConfig(
        base_url=GRAPH_BASE,
        access_token="test-token",
        timeout_seconds=5.0,
        page_size=100,
        lookup_window_minutes=60,
        lookup_max_candidates=20,
    )


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(
        max_attempts=2,
        initial_wait_seconds=0.01,
        max_wait_seconds=0.02,
        multiplier=1.0,
    )


@pytest.fixture
def report_config(graph_config: GraphConfig, retry_config: RetryConfig) -> ReportConfig:
    return ReportConfig(
        days_back=30,
        graph=graph_config,
        retry=retry_config,
    )


@pytest.fixture
def graph(graph_config: GraphConfig, retry_config: RetryConfig) -> Iterator[GraphClient]:
    """A GraphClient around a plain httpx.Client; respx intercepts its traffic."""
    http = httpx.Client(base_url=GRAPH_BASE)
    yield GraphClient(graph_config, retry_config, http=http)
    http.close()


# ------------------------------------------------------------------
# Sample emailThreats records
# ------------------------------------------------------------------


def make_submission(**overrides: Any) -> dict[str, Any]:
    """Build a raw emailThreatSubmission dict as the list endpoint returns it."""
    submission: dict[str, Any] = {
        "@odata.type": "#microsoft.graph.security.emailUrlThreatSubmission",
        "id": "49c5ef5b-1f65-444a-e6b9-08d772ea2059",
        "createdDateTime": "2025-06-02T09:15:00Z",
        "receivedDateTime": "2025-06-02T08:47:10Z",
        "source": "user",
        "category": "phishing",
        "originalCategory": "phishing",
        "contentType": "email",
        "clientSource": "microsoft",
        "status": "succeeded",
        "tenantId": "39238e87-b5ab-4ef6-a559-af54c6b07b42",
        "createdBy": {
            "user": {
                "id": "c52ce8db-3e4b-4181-93c4-7d6b6bffaf60",
                "displayName": "Alex Wilber",
                "email": "alexw@contoso.com",
            }
        },
        "recipientEmailAddress": "alexw@contoso.com",
        "senderEmailAddress": "billing@fabrikam-invoices.com",
        "subject": "Invoice #4471 overdue",
        "internetMessageId": "<DM6PR11MB4491@fabrikam-invoices.com>",
        "result": {
            "category": "phishing",
            "detail": "phishingConfirmed",
            "userMailboxSetting": "isFromAddressInternal",
            "detectedUrls": ["http://fabrikam-invoices.com/pay", "http://evil.test/x"],
            "detectedFiles": [
                {"fileName": "invoice.html", "fileHash": "a1b2c3"},
                {"fileName": "terms.pdf", "fileHash": "d4e5f6"},
            ],
        },
        "adminReview": {
            "reviewBy": "admin@contoso.com",
            "reviewDateTime": "2025-06-03T10:00:00Z",
            "reviewResult": "phishing",
        },
        "attackSimulationInfo": None,
        "tenantAllowOrBlockListAction": {
            "action": "block",
            "expirationDateTime": "2025-07-02T09:15:00Z",
            "note": "blocked after review",
            "results": [],
        },
    }
    submission.update(overrides)
    return submission


def make_page(records: list[dict[str, Any]], next_link: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"value": records}
    if next_link is not None:
        body["@odata.nextLink"] = next_link
    return body
