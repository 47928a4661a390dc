"""
Holiday Calendar Providers for the Pod Countdown Bot.

One provider per configured locale (country plus optional subdivision).
Each provider answers "which holidays fall on this date, and of what kind"
using the python-holidays package. Kinds are the package's category tags
(public, bank, optional, government, ...); the business-day calculator
decides which kinds matter.
"""
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional, Sequence

import holidays

from podbot.core.exceptions import ConfigurationError
from podbot.models.schemas import HolidayRecord


logger = logging.getLogger(__name__)


class HolidayCalendar(ABC):
    """
    Read-only holiday lookup for a single locale.

    Subclasses must call this initializer; ``locale`` has no class default.
    """

    def __init__(self, locale: str):
        if not locale:
            raise ConfigurationError("Holiday calendar needs a locale label", setting="holiday_locales")
        self.locale = locale

    @abstractmethod
    def query_holiday(self, day: date) -> list[HolidayRecord]:
        """Return every holiday observance on ``day`` (possibly empty)."""


class LocaleHolidayCalendar(HolidayCalendar):
    """
    python-holidays backed calendar for one country/subdivision pair.

    The package merges categories into a single name per date, so one
    calendar is built per category to keep the kind of each observance.

    Example:
        >>> cal = LocaleHolidayCalendar("US")
        >>> cal.query_holiday(date(2025, 7, 4))
        [HolidayRecord(date=datetime.date(2025, 7, 4), name='Independence Day', kind='public')]
    """

    def __init__(
        self,
        country: str,
        subdiv: Optional[str] = None,
        categories: Optional[Sequence[str]] = None,
    ):
        self.country = country.upper()
        self.subdiv = subdiv.upper() if subdiv else None
        super().__init__(f"{self.country}-{self.subdiv}" if self.subdiv else self.country)

        try:
            base = holidays.country_holidays(self.country, subdiv=self.subdiv)
            self.categories: tuple[str, ...] = tuple(categories or base.supported_categories)
            self._calendars = {
                category: holidays.country_holidays(
                    self.country, subdiv=self.subdiv, categories=(category,)
                )
                for category in self.categories
            }
        except (NotImplementedError, ValueError) as e:
            raise ConfigurationError(
                f"Unsupported holiday locale {self.locale}: {e}",
                setting="holiday_locales",
                value=self.locale,
            ) from e

        logger.debug(f"Holiday calendar {self.locale} loaded with categories {self.categories}")

    def query_holiday(self, day: date) -> list[HolidayRecord]:
        return [
            HolidayRecord(date=day, name=name, kind=category)
            for category, calendar in self._calendars.items()
            for name in calendar.get_list(day)
        ]

    def __repr__(self) -> str:
        return f"LocaleHolidayCalendar({self.locale!r}, categories={self.categories!r})"


def parse_locale(locale: str) -> tuple[str, Optional[str]]:
    """
    Split a ``COUNTRY[-SUBDIVISION]`` locale string.

    Examples:
        "US"    -> ("US", None)
        "IN-KA" -> ("IN", "KA")
    """
    value = (locale or "").strip()
    if not value:
        raise ConfigurationError("Holiday locale must not be empty", setting="holiday_locales")

    country, _, subdiv = value.partition("-")
    return country.strip().upper(), (subdiv.strip().upper() or None)


def build_calendars(locales: Iterable[str]) -> tuple[HolidayCalendar, ...]:
    """Construct one provider per locale, preserving the given order."""
    calendars = []
    for locale in locales:
        country, subdiv = parse_locale(locale)
        calendars.append(LocaleHolidayCalendar(country, subdiv))
    return tuple(calendars)
