"""Synchronous Microsoft Graph HTTP client.

Authentication is handled elsewhere: this client is either handed an
already-authenticated :class:`httpx.Client` or builds one around the
bearer token in :class:`GraphConfig`.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from .config import GraphConfig, RetryConfig
from .errors import GraphConnectionError, GraphRequestError
from .retry import transport_retry

logger = structlog.get_logger()


class GraphClient:
    """Issues GET requests against Graph and decodes JSON envelopes.

    Transport failures are retried according to :class:`RetryConfig`;
    non-2xx statuses are raised immediately as :class:`GraphRequestError`.
    """

    def __init__(
        self,
        config: GraphConfig,
        retry: RetryConfig | None = None,
        *,
        http: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._retry = retry or RetryConfig()
        self._http = http
        self._owns_http = http is None

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Build the HTTP session and verify it with a cheap probe.

        Raises :class:`GraphConnectionError` when no token is configured
        or the probe request fails.
        """
        if self._http is None:
            if self._config.access_token is None:
                raise GraphConnectionError(
                    "No Graph access token configured (set GRAPH_ACCESS_TOKEN)"
                )
            self._http = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers={
                    "Authorization": f"Bearer {self._config.access_token.get_secret_value()}",
                    "Accept": "application/json",
                },
            )

        try:
            body = self.get_json("/organization", params={"$select": "id,displayName"})
        except GraphRequestError as exc:
            raise GraphConnectionError(f"Graph connection check failed: {exc}") from exc

        tenants = body.get("value") or [{}]
        logger.info(
            "graph_connected",
            base_url=self.base_url,
            tenant=tenants[0].get("displayName"),
        )

    def close(self) -> None:
        if self._http is not None and self._owns_http:
            self._http.close()
            logger.debug("graph_client_closed")

    def __enter__(self) -> GraphClient:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET *url* (relative to the base URL, or absolute) and decode the body.

        Raises :class:`GraphRequestError` on any httpx failure (transport
        failures only after retries), on a non-2xx status, or when the body is not a JSON object.
        """
        if self._http is None:
            raise AssertionError("Client not connected")

        http = self._http

        @transport_retry(self._retry)
        def _send() -> httpx.Response:
            return http.get(url, params=params)

        try:
            response = _send()
        except httpx.HTTPError as exc:
            # Only TransportError is retried; decoding and redirect failures land here directly
            raise GraphRequestError(f"{type(exc).__name__}: {exc}", url=url) from exc

        if not response.is_success:
            raise GraphRequestError(
                f"HTTP {response.status_code}: {_error_message(response)}",
                url=url,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise GraphRequestError(
                "Response body is not valid JSON",
                url=url,
                status_code=response.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise GraphRequestError(
                "Response body is not a JSON object",
                url=url,
                status_code=response.status_code,
            )
        return body


def _error_message(response: httpx.Response) -> str:
    """Pull the Graph ``error.message`` out of a failed response, if any."""
    try:
        error = response.json().get("error") or {}
        return error.get("message") or response.text[:200]
    except (ValueError, AttributeError):
        return response.text[:200]
