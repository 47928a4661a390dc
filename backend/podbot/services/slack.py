"""
Slack Web API client for the Pod Countdown Bot.

Covers the two methods the bot needs:
- chat.postMessage: post Block Kit messages to a channel
- users.lookupByEmail: resolve pod members for mentions
"""
import logging
from typing import Any, Optional

import httpx

from podbot.core.exceptions import SlackAPIError


logger = logging.getLogger(__name__)


SLACK_API_BASE_URL = "https://slack.com/api"


class SlackClient:
    """
    Minimal async Slack Web API client.

    Features:
    - Bearer token auth
    - Raises SlackAPIError on HTTP failures and on ``ok: false`` bodies
    """

    def __init__(
        self,
        token: str,
        base_url: str = SLACK_API_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self.token}"},
        )

    async def _call(
        self,
        method: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """Invoke a Web API method and return the decoded body."""
        try:
            async with self._client() as client:
                if json is not None:
                    response = await client.post(f"/{method}", json=json)
                else:
                    response = await client.get(f"/{method}", params=params)
        except httpx.HTTPError as e:
            raise SlackAPIError(f"Slack {method} request failed: {e}", method=method) from e

        if response.status_code != 200:
            raise SlackAPIError(
                f"Slack {method} returned HTTP {response.status_code}",
                method=method,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise SlackAPIError(f"Slack {method} returned a non-JSON body", method=method) from e

        if not body.get("ok"):
            error_code = body.get("error") or "unknown_error"
            raise SlackAPIError(
                f"Slack {method} failed: {error_code}",
                method=method,
                error_code=error_code,
            )

        return body

    async def post_message(
        self,
        channel: str,
        blocks: list[dict[str, Any]],
        text: str = ""
    ) -> dict[str, Any]:
        """
        Post a message to a channel.

        Args:
            channel: Channel ID
            blocks: Block Kit blocks
            text: Fallback text for notifications

        Returns:
            Slack response body (includes ``ts``)
        """
        payload: dict[str, Any] = {"channel": channel, "blocks": blocks}
        if text:
            payload["text"] = text
        return await self._call("chat.postMessage", json=payload)

    async def lookup_user_by_email(self, email: str) -> dict[str, Any]:
        """Return the Slack user object registered for ``email``."""
        body = await self._call("users.lookupByEmail", params={"email": email})
        return body.get("user") or {}


async def find_slack_user_id_by_email(client: SlackClient, email: str) -> str:
    """
    Resolve a Slack user ID from an email address.

    Lookup failures are logged and degrade to an empty ID so the
    message can still be sent without the mention.
    """
    try:
        user = await client.lookup_user_by_email(email)
    except SlackAPIError as e:
        logger.error(f"Error finding Slack user by email {email}: {e.error_code or e.message}")
        return ""

    user_id = user.get("id")
    if not user_id:
        logger.error(f"Error finding Slack user by email {email}: Unknown error")
        return ""
    return user_id


def format_mention(user_id: str) -> str:
    """Slack mention markup for a user ID."""
    return f"<@{user_id}>"
