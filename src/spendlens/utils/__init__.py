"""Utility modules."""
from .logger import get_logger, set_run_context, configure_logging, get_app_home
from .exceptions import (
    SpendLensError,
    ConfigError,
    NetworkError,
    LLMError,
    StorageError,
    ValidationError,
    InvalidWindowError,
    MissingCredentialError,
    ResponseParseError,
    RetryableError,
    RetryableLLMError,
    AIRequestError
)
from .formatting import format_currency, format_date, format_percent

__all__ = [
    "get_logger",
    "set_run_context",
    "configure_logging",
    "get_app_home",
    "SpendLensError",
    "ConfigError",
    "NetworkError",
    "LLMError",
    "StorageError",
    "ValidationError",
    "InvalidWindowError",
    "MissingCredentialError",
    "ResponseParseError",
    "RetryableError",
    "RetryableLLMError",
    "AIRequestError",
    "format_currency",
    "format_date",
    "format_percent"
]
