"""
Test helpers for the Pod Countdown Bot.

Provides fake collaborators for common test operations.
"""
import json
from datetime import date
from typing import Iterable, Optional

import httpx

from podbot.models.schemas import HolidayRecord
from podbot.services.holiday_calendars import HolidayCalendar


class FakeHolidayCalendar(HolidayCalendar):
    """
    In-memory holiday calendar.

    Holidays are given as (date, name, kind) tuples; several entries
    may share a date.
    """

    def __init__(self, locale: str, holidays: Optional[Iterable[tuple]] = None):
        super().__init__(locale)
        self._holidays: dict[date, list[HolidayRecord]] = {}
        self.queries: list[date] = []

        for day, name, kind in holidays or []:
            self._holidays.setdefault(day, []).append(HolidayRecord(date=day, name=name, kind=kind))

    def query_holiday(self, day: date) -> list[HolidayRecord]:
        self.queries.append(day)
        return list(self._holidays.get(day, []))


class SlackRecorder:
    """
    httpx.MockTransport handler that imitates the Slack Web API.

    Records every request; emails in ``users`` resolve to user IDs,
    everything else answers users_not_found.
    """

    def __init__(self, users: Optional[dict[str, str]] = None, post_error: Optional[str] = None):
        self.users = users or {}
        self.post_error = post_error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path.endswith("/users.lookupByEmail"):
            email = request.url.params.get("email")
            if email in self.users:
                return httpx.Response(200, json={"ok": True, "user": {"id": self.users[email]}})
            return httpx.Response(200, json={"ok": False, "error": "users_not_found"})

        if request.url.path.endswith("/chat.postMessage"):
            if self.post_error:
                return httpx.Response(200, json={"ok": False, "error": self.post_error})
            return httpx.Response(200, json={"ok": True, "ts": "1700000000.000100"})

        return httpx.Response(404, json={"ok": False, "error": "unknown_method"})

    @property
    def posted(self) -> list[dict]:
        """JSON bodies of every chat.postMessage call."""
        return [
            json.loads(r.content)
            for r in self.requests
            if r.url.path.endswith("/chat.postMessage")
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
