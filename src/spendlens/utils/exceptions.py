"""Custom exception classes for SpendLens."""


class SpendLensError(Exception):
    """Base exception for SpendLens."""
    pass


class ConfigError(SpendLensError):
    """Configuration-related errors."""
    pass


class NetworkError(SpendLensError):
    """Network and API-related errors."""
    pass


class LLMError(SpendLensError):
    """LLM processing errors."""
    pass


class StorageError(SpendLensError):
    """Expense or snapshot store errors."""
    pass


class ValidationError(SpendLensError):
    """Data validation errors."""
    pass


class InvalidWindowError(ValidationError):
    """Analysis window length is not a positive number of days."""
    pass


class MissingCredentialError(LLMError, ConfigError):
    """No API key configured for the AI endpoint."""
    pass


class ResponseParseError(LLMError):
    """AI response could not be decoded into the expected schema."""
    pass


# Retryable errors
class RetryableError(SpendLensError):
    """Base class for errors that should trigger retry."""
    pass


class RetryableLLMError(RetryableError, LLMError):
    """LLM errors that can be retried."""
    pass


class AIRequestError(RetryableLLMError, NetworkError):
    """AI endpoint returned a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
