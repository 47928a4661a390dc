"""
Tests for the Slack Web API client.
"""
import asyncio
import json
import pytest

import httpx


def _client_for(handler):
    from podbot.services.slack import SlackClient

    return SlackClient("xoxb-test", transport=httpx.MockTransport(handler))


class TestSlackClient:

    @pytest.mark.unit
    def test_post_message_payload(self, slack_client, slack_recorder):
        blocks = [{"type": "divider"}]

        body = asyncio.run(slack_client.post_message("C123", blocks, text="hello"))

        request = slack_recorder.requests[-1]
        assert request.method == "POST"
        assert request.url.path == "/api/chat.postMessage"
        assert request.headers["Authorization"] == "Bearer xoxb-test"
        assert json.loads(request.content) == {"channel": "C123", "blocks": blocks, "text": "hello"}
        assert body["ts"] == "1700000000.000100"

    @pytest.mark.unit
    def test_lookup_user_by_email(self, slack_client, slack_recorder):
        user = asyncio.run(slack_client.lookup_user_by_email("lead1@example.com"))

        assert user == {"id": "U001"}
        assert slack_recorder.requests[-1].method == "GET"

    @pytest.mark.unit
    def test_ok_false_raises_with_error_code(self):
        from podbot.core.exceptions import SlackAPIError

        client = _client_for(lambda request: httpx.Response(200, json={"ok": False, "error": "not_in_channel"}))

        with pytest.raises(SlackAPIError) as exc_info:
            asyncio.run(client.post_message("C123", []))

        assert exc_info.value.error_code == "not_in_channel"
        assert exc_info.value.details["method"] == "chat.postMessage"

    @pytest.mark.unit
    def test_http_error_status_raises(self):
        from podbot.core.exceptions import SlackAPIError

        client = _client_for(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(SlackAPIError) as exc_info:
            asyncio.run(client.post_message("C123", []))

        assert exc_info.value.details["status_code"] == 500

    @pytest.mark.unit
    def test_non_json_body_raises(self):
        from podbot.core.exceptions import SlackAPIError

        client = _client_for(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(SlackAPIError):
            asyncio.run(client.lookup_user_by_email("a@example.com"))

    @pytest.mark.unit
    def test_transport_error_raises(self):
        from podbot.core.exceptions import SlackAPIError

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_for(handler)

        with pytest.raises(SlackAPIError):
            asyncio.run(client.post_message("C123", []))


class TestFindSlackUser:

    @pytest.mark.unit
    def test_known_email(self, slack_client):
        from podbot.services.slack import find_slack_user_id_by_email

        assert asyncio.run(find_slack_user_id_by_email(slack_client, "rm@example.com")) == "U100"

    @pytest.mark.unit
    def test_unknown_email_returns_empty(self, slack_client, caplog):
        from podbot.services.slack import find_slack_user_id_by_email

        user_id = asyncio.run(find_slack_user_id_by_email(slack_client, "ghost@example.com"))

        assert user_id == ""
        assert "users_not_found" in caplog.text

    @pytest.mark.unit
    def test_user_without_id_returns_empty(self):
        from podbot.services.slack import find_slack_user_id_by_email

        client = _client_for(lambda request: httpx.Response(200, json={"ok": True, "user": {}}))

        assert asyncio.run(find_slack_user_id_by_email(client, "a@example.com")) == ""

    @pytest.mark.unit
    def test_format_mention(self):
        from podbot.services.slack import format_mention

        assert format_mention("U001") == "<@U001>"
        assert format_mention("") == "<@>"
