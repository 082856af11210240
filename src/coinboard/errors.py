"""Price feed error types."""

from __future__ import annotations

from enum import Enum


class PriceFeedErrorCode(Enum):
    """Error classification codes."""

    AUTH_FAILED = "auth_failed"
    RATE_LIMITED = "rate_limited"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    PARSE_ERROR = "parse_error"
    EMPTY_RESULT = "empty_result"
    INVALID_REQUEST = "invalid_request"
    INVALID_CONFIG = "invalid_config"


class PriceFeedError(Exception):
    """Price feed exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether the caller should fall through to the next strategy.
        status_code: HTTP status of the failed response, when there was one.
    """

    def __init__(
        self,
        message: str,
        code: PriceFeedErrorCode = PriceFeedErrorCode.HTTP_ERROR,
        retryable: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
        self.status_code = status_code
