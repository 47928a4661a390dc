"""
Custom exceptions for the Pod Countdown Bot.
Provides meaningful error types for different failure scenarios.
"""
from typing import Any, Optional


class PodBotException(Exception):
    """Base exception for all Pod Countdown Bot errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging and API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(PodBotException):
    """Raised when startup configuration is unusable."""

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        value: Optional[Any] = None
    ):
        details = {}
        if setting:
            details["setting"] = setting
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details)


class CredentialsError(PodBotException):
    """Raised when a credential bundle is missing or malformed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        name: Optional[str] = None
    ):
        details = {}
        if source:
            details["source"] = source
        if name:
            details["name"] = name

        super().__init__(message, details)


class SlackAPIError(PodBotException):
    """Raised when a Slack Web API call fails."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        details = {}
        if method:
            details["method"] = method
        if error_code:
            details["error_code"] = error_code
        if status_code is not None:
            details["status_code"] = status_code

        self.error_code = error_code
        super().__init__(message, details)


class JiraAPIError(PodBotException):
    """Raised when a Jira REST call fails."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[str] = None
    ):
        details = {}
        if path:
            details["path"] = path
        if status_code is not None:
            details["status_code"] = status_code
        if original_error:
            details["original_error"] = original_error

        super().__init__(message, details)
