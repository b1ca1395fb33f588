"""
Core module for Search Fusion.

Provides:
- Unified exception hierarchy
- Deadline-bounded calls and circuit breaking for provider I/O
"""

from .exceptions import (
    # Base
    SearchFusionError,
    ErrorContext,
    ErrorSeverity,
    ErrorCategory,
    # Provider errors
    ProviderError,
    ProviderTimeoutError,
    ProviderHttpError,
    RateLimitError,
    NetworkError,
    ProviderUnavailableError,
    # Validation errors
    ValidationError,
    InvalidQueryError,
    InvalidParameterError,
    # Data errors
    DataError,
    ParseError,
    # Configuration errors
    ConfigurationError,
    # Classifier / task errors
    ClassifierError,
    TaskError,
    DuplicateTaskError,
    AITaskFailure,
    # Utilities
    is_retryable_error,
    user_facing_message,
)

from .async_utils import (
    TimedResult,
    timed_call,
    CircuitBreaker,
)

__all__ = [
    # Exceptions
    "SearchFusionError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderHttpError",
    "RateLimitError",
    "NetworkError",
    "ProviderUnavailableError",
    "ValidationError",
    "InvalidQueryError",
    "InvalidParameterError",
    "DataError",
    "ParseError",
    "ConfigurationError",
    "ClassifierError",
    "TaskError",
    "DuplicateTaskError",
    "AITaskFailure",
    "is_retryable_error",
    "user_facing_message",
    # Async utilities
    "TimedResult",
    "timed_call",
    "CircuitBreaker",
]
