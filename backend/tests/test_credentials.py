"""
Tests for credential retrieval.

Development mode reads Settings fields; other environments go
through a Secrets Manager client, replaced here by a MagicMock.
"""
import json
import pytest
from unittest.mock import MagicMock, patch


DEV_CREDENTIALS = dict(
    environment="development",
    openai_apikey="sk-test",
    jira_username="bot",
    jira_password="secret",
    slack_apikey="xoxb-test",
)


def _secrets_client(secrets: dict) -> MagicMock:
    """Secrets Manager mock answering get_secret_value by SecretId."""
    client = MagicMock()
    client.get_secret_value.side_effect = lambda SecretId: {"SecretString": secrets[SecretId]}
    return client


def _production_secrets(**overrides) -> dict:
    secrets = {
        "dev/kam/oai": json.dumps({"oai": "sk-prod"}),
        "dev/kam/jira/credentials": json.dumps({
            "protocol": "https",
            "host": "jira.example.com",
            "username": "svc-bot",
            "password": "hunter2",
            "apiVersion": "2",
            "strictSSL": True,
        }),
        "dev/kam/slack/credentials": json.dumps({"apikey": "xoxb-prod"}),
    }
    secrets.update(overrides)
    return secrets


class TestDevelopmentCredentials:

    @pytest.mark.unit
    def test_reads_settings(self, make_settings):
        from podbot.core.credentials import get_credentials

        config = make_settings(**DEV_CREDENTIALS)

        credentials = get_credentials(config)

        assert credentials.slack_api_key == "xoxb-test"
        assert credentials.openai_api_key == "sk-test"
        assert credentials.jira.username == "bot"
        assert credentials.jira.base_url == "https://ushur.atlassian.net/rest/api/2"

    @pytest.mark.unit
    @pytest.mark.parametrize("missing,name", [
        ("openai_apikey", "OPENAI_APIKEY"),
        ("jira_username", "JIRA_USERNAME/JIRA_PASSWORD"),
        ("jira_password", "JIRA_USERNAME/JIRA_PASSWORD"),
        ("slack_apikey", "SLACK_APIKEY"),
    ])
    def test_missing_variable(self, make_settings, missing, name):
        from podbot.core.credentials import get_credentials
        from podbot.core.exceptions import CredentialsError

        values = dict(DEV_CREDENTIALS)
        values[missing] = None
        config = make_settings(**values)

        with pytest.raises(CredentialsError) as exc_info:
            get_credentials(config)

        assert exc_info.value.details == {"source": "environment", "name": name}

    @pytest.mark.unit
    def test_does_not_touch_secrets_manager(self, make_settings):
        from podbot.core.credentials import get_credentials

        with patch("podbot.core.credentials.boto3.client") as mock_client:
            get_credentials(make_settings(**DEV_CREDENTIALS))

        mock_client.assert_not_called()


class TestSecretsManagerCredentials:

    @pytest.mark.unit
    def test_reads_three_secrets(self, make_settings):
        from podbot.core.credentials import get_credentials

        client = _secrets_client(_production_secrets())

        credentials = get_credentials(make_settings(environment="production"), secrets_client=client)

        assert credentials.openai_api_key == "sk-prod"
        assert credentials.slack_api_key == "xoxb-prod"
        assert credentials.jira.host == "jira.example.com"
        assert credentials.jira.password == "hunter2"
        assert client.get_secret_value.call_count == 3

    @pytest.mark.unit
    def test_builds_client_for_region(self, make_settings):
        from podbot.core.credentials import get_credentials

        client = _secrets_client(_production_secrets())

        with patch("podbot.core.credentials.boto3.client", return_value=client) as mock_factory:
            get_credentials(make_settings(environment="production", aws_region="eu-west-1"))

        mock_factory.assert_called_once_with("secretsmanager", region_name="eu-west-1")

    @pytest.mark.unit
    def test_empty_secret(self, make_settings):
        from podbot.core.credentials import get_credentials
        from podbot.core.exceptions import CredentialsError

        client = _secrets_client(_production_secrets(**{"dev/kam/oai": ""}))

        with pytest.raises(CredentialsError) as exc_info:
            get_credentials(make_settings(environment="production"), secrets_client=client)

        assert exc_info.value.details["name"] == "dev/kam/oai"

    @pytest.mark.unit
    def test_malformed_secret(self, make_settings):
        from podbot.core.credentials import get_credentials
        from podbot.core.exceptions import CredentialsError

        client = _secrets_client(_production_secrets(**{"dev/kam/slack/credentials": "not json"}))

        with pytest.raises(CredentialsError):
            get_credentials(make_settings(environment="production"), secrets_client=client)

    @pytest.mark.unit
    def test_missing_key_in_secret(self, make_settings):
        from podbot.core.credentials import get_credentials
        from podbot.core.exceptions import CredentialsError

        client = _secrets_client(_production_secrets(**{"dev/kam/slack/credentials": json.dumps({"token": "x"})}))

        with pytest.raises(CredentialsError) as exc_info:
            get_credentials(make_settings(environment="production"), secrets_client=client)

        assert "apikey" in exc_info.value.message

    @pytest.mark.unit
    def test_client_failure_is_wrapped(self, make_settings):
        from podbot.core.credentials import get_credentials
        from podbot.core.exceptions import CredentialsError

        client = MagicMock()
        client.get_secret_value.side_effect = RuntimeError("AccessDenied")

        with pytest.raises(CredentialsError) as exc_info:
            get_credentials(make_settings(environment="production"), secrets_client=client)

        assert "AccessDenied" in exc_info.value.message


class TestJiraOptions:

    @pytest.mark.unit
    def test_defaults(self):
        from podbot.core.credentials import jira_credentials_from_options

        credentials = jira_credentials_from_options({"host": "h", "username": "u", "password": "p"})

        assert credentials.protocol == "https"
        assert credentials.api_version == "2"
        assert credentials.strict_ssl == True

    @pytest.mark.unit
    def test_overrides(self):
        from podbot.core.credentials import jira_credentials_from_options

        credentials = jira_credentials_from_options({
            "host": "h", "username": "u", "password": "p",
            "protocol": "http", "apiVersion": 3, "strictSSL": False,
        })

        assert credentials.base_url == "http://h/rest/api/3"
        assert credentials.strict_ssl == False
