"""
Enum types shared across the bot.
"""
from enum import Enum


class HolidayKind(str, Enum):
    """
    Holiday categories reported by the calendar providers.
    The taxonomy is open-ended; these are the tags the bot knows by name.
    """
    PUBLIC = "public"  # suppresses business days by default
    BANK = "bank"
    GOVERNMENT = "government"
    OPTIONAL = "optional"
    OBSERVANCE = "observance"
    UNOFFICIAL = "unofficial"
