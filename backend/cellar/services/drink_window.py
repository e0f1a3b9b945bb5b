"""
Drink-window classification.

A drink window is an inclusive year range during which a bottle is
considered ready. Rules, in order:
1. No bounds            -> NO_WINDOW
2. year < start         -> TOO_EARLY
3. year > end           -> EXPIRED
4. otherwise            -> READY_NOW

Rule 2 runs before rule 3, so an inverted window (start > end) whose
start is still ahead classifies as TOO_EARLY.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ..config import Config
from ..models.enums import BadgeTone, DrinkState


@dataclass(frozen=True)
class DrinkWindow:
    """Inclusive year bounds; either may be unset."""
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass(frozen=True)
class DrinkBadge:
    """Short status shown in listings."""
    state: DrinkState
    label: str
    tone: BadgeTone


_BADGES = {
    DrinkState.NO_WINDOW: ("no window", BadgeTone.NEUTRAL),
    DrinkState.TOO_EARLY: ("too early", BadgeTone.WARN),
    DrinkState.EXPIRED: ("expired", BadgeTone.BAD),
    DrinkState.READY_NOW: ("drink now", BadgeTone.GOOD),
}


def current_year() -> int:
    return date.today().year


def classify(window: DrinkWindow, year: int) -> DrinkState:
    """Classify a window against the given year. Total over its inputs."""
    if window.start is None and window.end is None:
        return DrinkState.NO_WINDOW
    if window.start is not None and year < window.start:
        return DrinkState.TOO_EARLY
    if window.end is not None and year > window.end:
        return DrinkState.EXPIRED
    return DrinkState.READY_NOW


def render_label(window: DrinkWindow, year: int) -> str:
    """Long label for the detail view, naming the bound(s) that apply."""
    state = classify(window, year)
    if state == DrinkState.NO_WINDOW:
        return "no drink window set"
    if state == DrinkState.TOO_EARLY:
        return f"too early (from {window.start})"
    if state == DrinkState.EXPIRED:
        return f"expired (to {window.end})"
    if window.start is not None and window.end is not None:
        return f"ready now ({window.start}–{window.end})"
    if window.start is not None:
        return f"ready now (from {window.start})"
    return f"ready now (to {window.end})"


def badge(window: DrinkWindow, year: int) -> DrinkBadge:
    """Short badge for listings."""
    state = classify(window, year)
    label, tone = _BADGES[state]
    return DrinkBadge(state=state, label=label, tone=tone)


def is_drink_now(window: DrinkWindow, year: int) -> bool:
    """True only for READY_NOW; bottles without a window are excluded."""
    return classify(window, year) == DrinkState.READY_NOW


def is_inverted(window: DrinkWindow) -> bool:
    """Both bounds set and start after end."""
    return window.start is not None and window.end is not None and window.start > window.end


def clamp_year(value: Any) -> Optional[int]:
    """
    Clamp a user-supplied year to [MIN_YEAR, MAX_YEAR] before persisting.

    None, blanks and unparsable input become None rather than a sentinel year.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        year = int(value)
    except (TypeError, ValueError):
        return None
    return max(Config.MIN_YEAR, min(Config.MAX_YEAR, year))


def preset_window(preset: str, year: int) -> DrinkWindow:
    """
    Quick presets from the detail view.

    "now+1" / "now+3" / "now+5" open the window this year for n years;
    "clear" removes it.

    Raises:
        ValueError: Unknown preset name.
    """
    if preset == "clear":
        return DrinkWindow()
    if preset not in Config.WINDOW_PRESETS:
        raise ValueError(f"Unknown drink window preset: {preset}")
    return DrinkWindow(start=year, end=year + Config.WINDOW_PRESETS[preset])
