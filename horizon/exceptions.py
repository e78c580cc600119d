"""
Horizon Exceptions - Page-level fetch failures.

A FetchError means the whole page is unusable. It propagates to the
ingestion driver, which decides whether to retry the same cursor, skip,
or halt. The client itself never retries.
"""

from typing import Any, Optional

from core.exceptions import ErrorClassification, IndexerException, Severity


class FetchError(IndexerException):
    """Base exception for failures fetching a Horizon page."""

    default_severity = Severity.MEDIUM
    default_classification = ErrorClassification.TRANSIENT

    def __init__(
        self,
        message: str,
        request_url: Optional[str] = None,
        cause: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
        **kwargs,
    ) -> None:
        context = context or {}
        if request_url:
            context["request_url"] = request_url
        super().__init__(message, context=context, cause=cause, **kwargs)
        self.request_url = request_url

    @property
    def retryable(self) -> bool:
        """Whether fetching the same cursor again may succeed."""
        return self.is_recoverable


class TransportError(FetchError):
    """Network-level failure: DNS, connection refused, reset, timeout."""


class HttpStatusError(FetchError):
    """Horizon answered with a non-success HTTP status."""

    def __init__(
        self,
        status_code: int,
        request_url: Optional[str] = None,
        response_body: Optional[str] = None,
    ) -> None:
        context: dict[str, Any] = {"status_code": status_code}
        if response_body:
            context["response_body"] = response_body[:1000]
        super().__init__(
            message=f"HTTP {status_code}",
            request_url=request_url,
            context=context,
            classification=(
                ErrorClassification.TRANSIENT
                if status_code == 429 or status_code >= 500
                else ErrorClassification.NON_RECOVERABLE
            ),
        )
        self.status_code = status_code
        self.response_body = response_body

    def is_rate_limited(self) -> bool:
        """Check if error is due to rate limiting."""
        return self.status_code == 429

    def is_server_error(self) -> bool:
        """Check if error is server-side."""
        return 500 <= self.status_code < 600

    def is_client_error(self) -> bool:
        """Check if error is client-side."""
        return 400 <= self.status_code < 500


class DecodeError(FetchError):
    """Response body does not match the expected page shape."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.NON_RECOVERABLE
