"""Standardized error handling for the application."""

import logging
from typing import Any, Dict, Optional

# Configure logger
logger = logging.getLogger(__name__)


class SustainaViewError(Exception):
    """Base exception class for all application errors."""

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary for API responses.

        Returns:
            Dict containing error details
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }

    def log(self, level: int = logging.ERROR) -> None:
        """Log the error with appropriate level and context.

        Args:
            level: Logging level to use
        """
        log_context = {
            "error_type": self.__class__.__name__,
            "status_code": self.status_code,
            **self.details,
        }
        logger.log(level, f"{self.message}", extra=log_context)


# AI Provider Errors
class ProviderError(SustainaViewError):
    """Base class for AI provider errors."""

    def __init__(self, message: str = "AI provider error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=502, details=details)


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    retry_after: float = 0

    def __init__(self, provider: str, retry_after: Optional[float] = None):
        """Initialize rate limit error.

        Args:
            provider: Name of the AI provider
            retry_after: Seconds to wait before retrying
        """
        self.retry_after = retry_after or 0
        super().__init__(
            message=f"Rate limit exceeded for provider {provider}",
            details={"provider": provider, "retry_after": self.retry_after},
        )
        self.status_code = 429


class InvalidResponseError(ProviderError):
    """The provider answered, but not in the expected shape."""

    def __init__(self, message: str = "Invalid response from AI provider", raw: Optional[str] = None):
        super().__init__(message=message, details={"raw": raw[:500]} if raw else None)
        self.raw = raw


# External service errors
class ExternalServiceError(SustainaViewError):
    """A third-party service (search, blob store) failed."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__(message=message, status_code=502, details={"service": service, **(details or {})})


class StorageError(ExternalServiceError):
    """Image blob store failure."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(service="storage", message=message, details=details)


# Request errors
class InvalidRequestError(SustainaViewError):
    """A request failed validation before any external call was made."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)
