"""Report configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars;
command-line flags are applied on top by :mod:`threat_submissions.cli`.
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

from .models import SubmissionCategory


class GraphConfig(BaseSettings):
    """Microsoft Graph connection and query settings."""

    model_config = {"env_prefix": "GRAPH_"}

    base_url: str = Field(
        default="https://graph.microsoft.com/beta",
        description="Graph API root (the threat submission API lives on beta)",
    )
    access_token: SecretStr | None = Field(
        default=None,
        description="Bearer token issued by the external sign-in flow",
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP request timeout")
    page_size: int = Field(default=100, description="$top hint for the submissions list query")
    lookup_window_minutes: int = Field(
        default=60,
        description="Half-width of the receivedDateTime window for Message-ID recovery",
    )
    lookup_max_candidates: int = Field(
        default=20,
        description="$top for the mailbox message query",
    )


class RetryConfig(BaseSettings):
    """Transport-level retry settings driven by Tenacity.

    Only connection-level failures are retried; HTTP error statuses are final.
    """

    model_config = {"env_prefix": "RETRY_"}

    max_attempts: int = Field(default=3, description="Maximum attempts per HTTP request")
    initial_wait_seconds: float = Field(
        default=0.5,
        description="Initial backoff wait in seconds",
    )
    max_wait_seconds: float = Field(
        default=10.0,
        description="Maximum backoff wait in seconds",
    )
    multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")


class ReportConfig(BaseSettings):
    """Root configuration for a report run.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "REPORT_"}

    days_back: int = Field(default=180, ge=1, description="Lookback window in days")
    category: SubmissionCategory | None = Field(
        default=None,
        description="Restrict to a single submission category",
    )
    include_admin_submissions: bool = Field(
        default=False,
        description="Also report submissions made by administrators",
    )
    export_html: bool = Field(default=False, description="Write the interactive HTML report")
    output_dir: str = Field(default=".", description="Directory for exported artifacts")
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(default=False, description="Emit JSON log lines instead of console output")

    graph: GraphConfig = Field(default_factory=GraphConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
