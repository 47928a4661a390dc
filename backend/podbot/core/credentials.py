"""
Credential retrieval for the Pod Countdown Bot.

Development mode reads credentials from environment variables.
Every other environment pulls three secrets from AWS Secrets Manager:
- Jira connection options (JSON object)
- Slack bot token ({"apikey": ...})
- OpenAI API key ({"oai": ...})
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

import boto3

from podbot.core.config import Settings
from podbot.core.exceptions import CredentialsError

if TYPE_CHECKING:
    import botocore.client


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JiraCredentials:
    """Connection options for the Jira REST API."""
    host: str
    username: str
    password: str
    protocol: str = "https"
    api_version: str = "2"
    strict_ssl: bool = True

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}/rest/api/{self.api_version}"


@dataclass(frozen=True)
class Credentials:
    """The three credential bundles the bot needs at startup."""
    jira: JiraCredentials
    slack_api_key: str
    openai_api_key: str


def _get_secret_string(client: "botocore.client.BaseClient", secret_name: str) -> str:
    response = client.get_secret_value(SecretId=secret_name)
    secret = response.get("SecretString") or ""
    if not secret:
        raise CredentialsError(
            f"Secret {secret_name} is empty",
            source="secretsmanager",
            name=secret_name,
        )
    return secret


def _get_secret_json(client: "botocore.client.BaseClient", secret_name: str) -> dict[str, Any]:
    secret = _get_secret_string(client, secret_name)
    try:
        payload = json.loads(secret)
    except json.JSONDecodeError as e:
        raise CredentialsError(
            f"Secret {secret_name} is not valid JSON: {e}",
            source="secretsmanager",
            name=secret_name,
        ) from e
    if not isinstance(payload, dict):
        raise CredentialsError(
            f"Secret {secret_name} must be a JSON object",
            source="secretsmanager",
            name=secret_name,
        )
    return payload


def _require_key(payload: dict[str, Any], key: str, secret_name: str) -> Any:
    value = payload.get(key)
    if not value:
        raise CredentialsError(
            f"Secret {secret_name} has no '{key}' value",
            source="secretsmanager",
            name=secret_name,
        )
    return value


def jira_credentials_from_options(options: dict[str, Any], secret_name: str = "jira") -> JiraCredentials:
    """Build Jira credentials from a jira-client style options object."""
    return JiraCredentials(
        host=_require_key(options, "host", secret_name),
        username=_require_key(options, "username", secret_name),
        password=_require_key(options, "password", secret_name),
        protocol=options.get("protocol", "https"),
        api_version=str(options.get("apiVersion", "2")),
        strict_ssl=bool(options.get("strictSSL", True)),
    )


def _credentials_from_environment(config: Settings) -> Credentials:
    logger.info("Running in development mode")

    if not config.openai_apikey:
        raise CredentialsError("OPENAI_APIKEY is not set", source="environment", name="OPENAI_APIKEY")
    if not config.jira_username or not config.jira_password:
        raise CredentialsError(
            "JIRA_USERNAME or JIRA_PASSWORD is not set",
            source="environment",
            name="JIRA_USERNAME/JIRA_PASSWORD",
        )
    if not config.slack_apikey:
        raise CredentialsError("SLACK_APIKEY is not set", source="environment", name="SLACK_APIKEY")

    return Credentials(
        jira=JiraCredentials(
            host=config.jira_host,
            username=config.jira_username,
            password=config.jira_password,
            protocol=config.jira_protocol,
            api_version=config.jira_api_version,
            strict_ssl=config.jira_strict_ssl,
        ),
        slack_api_key=config.slack_apikey,
        openai_api_key=config.openai_apikey,
    )


def _credentials_from_secrets_manager(
    config: Settings,
    client: Optional["botocore.client.BaseClient"] = None
) -> Credentials:
    logger.info(f"Loading credentials from AWS Secrets Manager ({config.aws_region})")
    client = client or boto3.client("secretsmanager", region_name=config.aws_region)

    openai_secret = _get_secret_json(client, config.openai_secret_name)
    jira_secret = _get_secret_json(client, config.jira_secret_name)
    slack_secret = _get_secret_json(client, config.slack_secret_name)

    return Credentials(
        jira=jira_credentials_from_options(jira_secret, config.jira_secret_name),
        slack_api_key=_require_key(slack_secret, "apikey", config.slack_secret_name),
        openai_api_key=_require_key(openai_secret, "oai", config.openai_secret_name),
    )


def get_credentials(
    config: Settings,
    secrets_client: Optional["botocore.client.BaseClient"] = None
) -> Credentials:
    """
    Resolve credentials for the current environment.

    Args:
        config: Application settings
        secrets_client: Optional pre-built Secrets Manager client

    Returns:
        Credentials bundle

    Raises:
        CredentialsError: a required value is missing or malformed
    """
    if config.is_development:
        return _credentials_from_environment(config)

    try:
        return _credentials_from_secrets_manager(config, secrets_client)
    except CredentialsError:
        raise
    except Exception as e:
        logger.exception("Error loading credentials from Secrets Manager")
        raise CredentialsError(
            f"Could not load credentials: {e}",
            source="secretsmanager",
        ) from e
