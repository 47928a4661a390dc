"""
Jira integration for the Pod Countdown Bot.

Thin async wrapper over the Jira REST API plus a processor that
counts, paginates and remaps issues and posts comments. Wired into
the process at startup; none of the scheduled jobs call it yet.
"""
import logging
from typing import Any, AsyncIterator, Optional, Sequence

import httpx

from podbot.core.credentials import JiraCredentials
from podbot.core.exceptions import JiraAPIError
from podbot.models.schemas import UserStory


logger = logging.getLogger(__name__)


JIRA_CUSTOM_FIELD_MAPPING: dict[str, str] = {
    "customfield_11454": "design",
    "customfield_11425": "comments",
    "customfield_10024": "storyPoints",
    "customfield_10144": "severity",
    "customfield_10232": "podTeam",
    "customfield_10152": "acceptanceCriteria",
}

ACCEPTANCE_CRITERIA_FIELD = "customfield_10152"

DEFAULT_SEARCH_FIELDS: tuple[str, ...] = (
    "key",
    "summary",
    "issuetype",
    "status",
    "priority",
    "assignee",
    "assigneeid",
    "parent",
    "description",
    "fixVersions",
    *JIRA_CUSTOM_FIELD_MAPPING.keys(),
)

DEFAULT_ISSUE_FIELDS: tuple[str, ...] = (
    "key",
    "summary",
    "issuetype",
    "status",
    "priority",
    "assignee",
    "description",
    "fixVersions",
    *JIRA_CUSTOM_FIELD_MAPPING.keys(),
)

DEFAULT_PAGE_SIZE = 100


class JiraClient:
    """Async Jira REST client (basic auth)."""

    def __init__(
        self,
        credentials: JiraCredentials,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.credentials.base_url,
            auth=(self.credentials.username, self.credentials.password),
            verify=self.credentials.strict_ssl,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise JiraAPIError(
                f"Jira {method} {path} returned HTTP {e.response.status_code}",
                path=path,
                status_code=e.response.status_code,
                original_error=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise JiraAPIError(
                f"Jira {method} {path} failed: {e}",
                path=path,
                original_error=str(e),
            ) from e

        if not response.content:
            return {}
        return response.json()

    async def search(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = DEFAULT_PAGE_SIZE,
        fields: Sequence[str] = DEFAULT_SEARCH_FIELDS
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/search",
            json={
                "jql": jql,
                "startAt": start_at,
                "maxResults": max_results,
                "fields": list(fields),
            },
        )

    async def get_issue(self, issue_key: str, fields: Sequence[str] = DEFAULT_ISSUE_FIELDS) -> dict[str, Any]:
        return await self._request("GET", f"/issue/{issue_key}", params={"fields": ",".join(fields)})

    async def add_comment(self, issue_key: str, body: str) -> dict[str, Any]:
        return await self._request("POST", f"/issue/{issue_key}/comment", json={"body": body})


class JiraProcessor:
    """Issue queries and updates on top of a JiraClient."""

    def __init__(self, jira: JiraClient):
        self.jira = jira

    async def get_issue_count(self, jql: str) -> int:
        """Total number of issues matching ``jql`` (no issues fetched)."""
        try:
            result = await self.jira.search(jql, max_results=0, fields=[])
        except JiraAPIError as e:
            logger.error(f"Error fetching issue count: {e.message}")
            raise
        return int(result.get("total", 0))

    async def iter_pages(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = DEFAULT_PAGE_SIZE,
        fields: Sequence[str] = DEFAULT_SEARCH_FIELDS
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """
        Yield pages of issues until Jira returns an empty page.

        Restartable from any offset by passing ``start_at``.
        """
        offset = start_at
        while True:
            result = await self.jira.search(jql, start_at=offset, max_results=max_results, fields=fields)
            issues = result.get("issues") or []
            logger.info(f"Fetched {len(issues)} issues from startAt {offset}")
            if not issues:
                return
            yield issues
            offset += max_results

    async def get_all(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = DEFAULT_PAGE_SIZE,
        fields: Sequence[str] = DEFAULT_SEARCH_FIELDS
    ) -> list[dict[str, Any]]:
        """
        Fetch every issue matching ``jql``.

        A failed page ends the scan; issues fetched before it are returned.
        """
        issues: list[dict[str, Any]] = []
        try:
            async for page in self.iter_pages(jql, start_at, max_results, fields):
                issues.extend(page)
        except JiraAPIError as e:
            logger.error(f"Error fetching issues after {len(issues)} results: {e.message}")
        return issues

    async def get_issue(self, issue_key: str) -> UserStory:
        """Fetch one issue and remap it to a UserStory."""
        issue = await self.jira.get_issue(issue_key)
        return remap_issue(issue)

    async def add_comment_to_issue(self, issue_key: str, comment: str) -> None:
        await self.jira.add_comment(issue_key, comment)


def remap_issue(issue: dict[str, Any]) -> UserStory:
    """Map a raw Jira issue onto the fields the bot uses."""
    fields = issue.get("fields") or {}
    return UserStory(
        key=issue.get("key", ""),
        summary=fields.get("summary") or "",
        description=fields.get("description") or "",
        acceptance_criteria=fields.get(ACCEPTANCE_CRITERIA_FIELD) or "",
    )
