# Core modules - Config, Credentials, Exceptions, Logging
from .config import settings, get_settings, Settings
from .exceptions import (
    PodBotException,
    ConfigurationError,
    CredentialsError,
    SlackAPIError,
    JiraAPIError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "PodBotException",
    "ConfigurationError",
    "CredentialsError",
    "SlackAPIError",
    "JiraAPIError",
]
