"""Failure classification for lookbook.

Nothing in lookbook retries on its own. Classification only decides how a
failure is surfaced: transient upstream failures become a 503 (the client
may try again later), everything else a 502.

Example:
    from lookbook.core.errors import classify_error, is_retryable

    try:
        suggestion = await provider.suggest(image_b64, "image/jpeg")
    except GroqAPIError as ex:
        status = 503 if is_retryable(classify_error(ex)) else 502
"""

import asyncio
import re
from enum import Enum, auto


class ErrorCategory(Enum):
    # Transient
    RATE_LIMIT = auto()
    TIMEOUT = auto()
    NETWORK = auto()
    SERVICE_UNAVAILABLE = auto()

    # Permanent
    INVALID_INPUT = auto()
    AUTH_FAILURE = auto()
    NOT_FOUND = auto()
    CONFIGURATION = auto()
    UNKNOWN = auto()


RETRYABLE_CATEGORIES = frozenset(
    {
        ErrorCategory.RATE_LIMIT,
        ErrorCategory.TIMEOUT,
        ErrorCategory.NETWORK,
        ErrorCategory.SERVICE_UNAVAILABLE,
    }
)

STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    400: ErrorCategory.INVALID_INPUT,
    401: ErrorCategory.AUTH_FAILURE,
    403: ErrorCategory.AUTH_FAILURE,
    404: ErrorCategory.NOT_FOUND,
    408: ErrorCategory.TIMEOUT,
    413: ErrorCategory.INVALID_INPUT,
    422: ErrorCategory.INVALID_INPUT,
    429: ErrorCategory.RATE_LIMIT,
    504: ErrorCategory.TIMEOUT,
}

# Checked in order; the first phrase found in the message wins.
MESSAGE_PATTERNS: tuple[tuple[tuple[str, ...], ErrorCategory], ...] = (
    (("timeout", "timed out"), ErrorCategory.TIMEOUT),
    (("connection", "network"), ErrorCategory.NETWORK),
    (("rate limit", "too many requests"), ErrorCategory.RATE_LIMIT),
    (
        ("service unavailable", "bad gateway", "internal server error"),
        ErrorCategory.SERVICE_UNAVAILABLE,
    ),
    (
        ("unauthorized", "forbidden", "api key", "authentication"),
        ErrorCategory.AUTH_FAILURE,
    ),
    (("not found",), ErrorCategory.NOT_FOUND),
    (("bad request", "invalid", "validation"), ErrorCategory.INVALID_INPUT),
    (("not configured", "configuration"), ErrorCategory.CONFIGURATION),
)

_STATUS_IN_MESSAGE = re.compile(r"\b[45]\d\d\b")


class ClassifiedError(Exception):
    """An error that already knows its category.

    Attributes:
        category: What kind of failure this is.
        original_error: The underlying exception, if this wraps one.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    @classmethod
    def from_exception(cls, ex: Exception, category: ErrorCategory | None = None):
        """Wrap ``ex``, classifying it unless a category is given."""
        return cls(str(ex), category or classify_error(ex), original_error=ex)


class TransientError(ClassifiedError):
    """The same request may succeed later."""


class PermanentError(ClassifiedError):
    """Repeating the request will not help."""


class RackConfigurationError(PermanentError):
    """Raised when rack geometry is malformed (e.g. a non-positive stride)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCategory.CONFIGURATION)


def status_category(status: int) -> ErrorCategory | None:
    """Category for an HTTP status, or None for non-error statuses."""
    if status in STATUS_CATEGORIES:
        return STATUS_CATEGORIES[status]
    if 500 <= status < 600:
        return ErrorCategory.SERVICE_UNAVAILABLE
    if 400 <= status < 500:
        return ErrorCategory.INVALID_INPUT
    return None


def classify_error(error: Exception) -> ErrorCategory:
    """Classify an exception into an error category.

    Order of evidence: an existing classification, the exception type, an
    integer ``status`` attribute (HTTP client errors), phrases in the message,
    and finally a 4xx/5xx code mentioned in the message.
    """
    if isinstance(error, ClassifiedError):
        return error.category

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT

    status = getattr(error, "status", None)
    if isinstance(status, int):
        category = status_category(status)
        if category is not None:
            return category

    message = str(error).lower()
    for phrases, category in MESSAGE_PATTERNS:
        if any(phrase in message for phrase in phrases):
            return category

    for code in _STATUS_IN_MESSAGE.findall(message):
        category = status_category(int(code))
        if category is not None:
            return category

    return ErrorCategory.UNKNOWN


def is_retryable(category: ErrorCategory) -> bool:
    return category in RETRYABLE_CATEGORIES
