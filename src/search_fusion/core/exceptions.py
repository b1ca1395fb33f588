"""
Unified Exception Hierarchy for Search Fusion.

Exception Hierarchy:
    SearchFusionError (base)
    ├── ProviderError
    │   ├── ProviderTimeoutError
    │   ├── ProviderHttpError
    │   │   └── RateLimitError
    │   ├── NetworkError
    │   └── ProviderUnavailableError
    ├── ValidationError
    │   ├── InvalidQueryError
    │   └── InvalidParameterError
    ├── DataError
    │   └── ParseError
    ├── ConfigurationError
    ├── ClassifierError
    └── TaskError
        ├── DuplicateTaskError
        └── AITaskFailure

Provider and classifier errors are recovered where they happen (degraded
provider / ``trigger=False``). Only validation and configuration errors
reach the caller as a failed search response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    WARNING = auto()  # Recoverable, request continues
    ERROR = auto()  # Failed but can retry
    CRITICAL = auto()  # Cannot continue
    TRANSIENT = auto()  # Temporary, should retry automatically


class ErrorCategory(Enum):
    """Categories for error classification."""

    PROVIDER = "provider"
    VALIDATION = "validation"
    DATA = "data"
    CONFIGURATION = "config"
    CLASSIFIER = "classifier"
    TASK = "task"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context attached to an error."""

    provider: str | None = None
    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    retry_after: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class SearchFusionError(Exception):
    """
    Base exception for all Search Fusion errors.

    Provides:
    - Structured error context
    - Severity classification
    - Retry guidance
    """

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.PROVIDER,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.provider:
            result["provider"] = self.context.provider
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.retry_after:
            result["retry_after_seconds"] = self.context.retry_after
        return result


# =============================================================================
# Provider Errors
# =============================================================================


class ProviderError(SearchFusionError):
    """Base class for errors raised by a search or language-model backend."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        context: ErrorContext | None = None,
        retryable: bool = True,
    ) -> None:
        ctx = context or ErrorContext(provider=provider)
        super().__init__(
            f"{provider}: {message}" if provider else message,
            context=ctx,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.PROVIDER,
            retryable=retryable,
        )
        self.provider = provider


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its deadline."""

    def __init__(
        self,
        provider: str | None = None,
        timeout: float | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        message = f"request timed out after {timeout:.1f}s" if timeout else "request timed out"
        super().__init__(message, provider=provider, context=context, retryable=True)
        self.timeout = timeout
        self.severity = ErrorSeverity.TRANSIENT


class ProviderHttpError(ProviderError):
    """Raised when a backend answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        *,
        provider: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        message = f"API responded with status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            message,
            provider=provider,
            context=context,
            retryable=status_code >= 500 or status_code == 429,
        )
        self.status_code = status_code


class RateLimitError(ProviderHttpError):
    """Raised when a backend answers 429 Too Many Requests."""

    def __init__(
        self,
        detail: str = "",
        *,
        provider: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        ctx = ErrorContext(
            provider=provider,
            suggestion="Wait and retry the request",
            retry_after=retry_after,
        )
        super().__init__(429, detail, provider=provider, context=ctx)
        self.severity = ErrorSeverity.TRANSIENT


class NetworkError(ProviderError):
    """Raised for network connectivity issues."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        provider: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, provider=provider, context=context, retryable=True)


class ProviderUnavailableError(ProviderError):
    """Raised when a provider is short-circuited by its circuit breaker."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        *,
        provider: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        ctx = ErrorContext(provider=provider, retry_after=retry_after)
        super().__init__(message, provider=provider, context=ctx, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SearchFusionError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class InvalidQueryError(ValidationError):
    """Raised when the search text is missing or blank."""

    def __init__(
        self,
        query: str | None,
        reason: str = "Search keywords cannot be empty",
    ) -> None:
        ctx = ErrorContext(
            operation="search",
            input_value=query,
            suggestion="Provide non-empty search keywords",
        )
        super().__init__(reason, context=ctx)


class InvalidParameterError(ValidationError):
    """Raised when a request parameter value is invalid."""

    def __init__(
        self,
        param_name: str,
        value: Any,
        expected: str,
    ) -> None:
        ctx = ErrorContext(input_value=value, suggestion=f"Expected {expected}")
        super().__init__(
            f"Invalid parameter '{param_name}': {value!r} (expected {expected})",
            context=ctx,
        )
        self.param_name = param_name


# =============================================================================
# Data Errors
# =============================================================================


class DataError(SearchFusionError):
    """Base class for data-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
            retryable=False,
        )


class ParseError(DataError):
    """Raised when a provider payload cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
    ) -> None:
        full_msg = f"Parse error: {message}"
        if source:
            full_msg = f"Parse error ({source}): {message}"
        super().__init__(full_msg, context=ErrorContext(provider=source))


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SearchFusionError):
    """Raised when nothing usable is configured for a request."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )


# =============================================================================
# Classifier / Task Errors
# =============================================================================


class ClassifierError(SearchFusionError):
    """Raised when tokenization or intent classification fails."""

    def __init__(self, message: str, *, query: str | None = None) -> None:
        super().__init__(
            message,
            context=ErrorContext(operation="classify", input_value=query),
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.CLASSIFIER,
            retryable=False,
        )


class TaskError(SearchFusionError):
    """Base class for AI task registry errors."""

    def __init__(self, message: str, *, task_id: str | None = None) -> None:
        super().__init__(
            message,
            context=ErrorContext(operation="ai_task", input_value=task_id),
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.TASK,
            retryable=False,
        )
        self.task_id = task_id


class DuplicateTaskError(TaskError):
    """Raised when a task id is registered twice."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"AI task already registered: {task_id}", task_id=task_id)


class AITaskFailure(TaskError):
    """Raised when background summarization cannot produce an overview."""


# =============================================================================
# Utilities
# =============================================================================


def is_retryable_error(error: BaseException) -> bool:
    """Check if an error should be retried."""
    if isinstance(error, SearchFusionError):
        return error.retryable

    error_str = str(error).lower()
    transient_patterns = [
        "rate limit",
        "too many requests",
        "temporarily unavailable",
        "service unavailable",
        "connection reset",
        "timeout",
    ]
    return any(pattern in error_str for pattern in transient_patterns)


def user_facing_message(error: BaseException) -> str:
    """Human-readable message for the ``error`` field of a failed response."""
    if isinstance(error, RateLimitError):
        return "API call rate is too high, please try again later"
    if isinstance(error, ProviderTimeoutError):
        return "Request timed out, please try again later"
    if isinstance(error, SearchFusionError):
        return str(error)
    return "Server failed to process the search request"
