"""
Enums for type-safe string constants in the wine cellar backend.
"""

from enum import Enum


class SearchLanguage(str, Enum):
    """Encyclopedia edition a search result came from."""
    EN = "en"
    FR = "fr"


class DrinkState(str, Enum):
    """Readiness of a bottle relative to its drink window."""
    NO_WINDOW = "no_window"
    TOO_EARLY = "too_early"
    EXPIRED = "expired"
    READY_NOW = "ready_now"


class BadgeTone(str, Enum):
    """Display tone for a drink-window badge."""
    GOOD = "good"
    WARN = "warn"
    BAD = "bad"
    NEUTRAL = "neutral"


class CellarSort(str, Enum):
    """Sort orders for the cellar listing."""
    CREATED = "created"
    RATING = "rating"
    PRODUCER = "producer"
    LOCATION = "location"
