"""
Session Feature Extraction

Converts a DoctorSession into a fixed 6-dimensional feature vector:

    [time_of_day, day_of_week, availability, day_popularity,
     hour_popularity, specialty_popularity]

Calendar helpers are pure and locale-independent: weekdays come from
datetime.date, never from formatted strings.
"""

from datetime import date
from typing import Optional, Tuple

from appointment_ai.algorithms.popularity import PopularityTables, DEFAULT_TABLES
from appointment_ai.constants.popularity import (
    WEEKDAY_NAMES,
    FALLBACK_HOUR,
    FALLBACK_DAY_FEATURE,
)
from appointment_ai.schemas.session import DoctorSession

FeatureVector = Tuple[float, float, float, float, float, float]

FEATURE_NAMES = (
    "time_of_day",
    "day_of_week",
    "availability",
    "day_popularity",
    "hour_popularity",
    "specialty_popularity",
)


# ============================================================================
# Calendar Helpers
# ============================================================================

def parse_session_date(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD (or ISO datetime) string, None if malformed."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def weekday_of(value: Optional[str]) -> Optional[int]:
    """
    Weekday index of a session date, Sunday=0 .. Saturday=6.

    Example:
        >>> weekday_of("2024-06-01")  # Saturday
        6
    """
    parsed = parse_session_date(value)
    if parsed is None:
        return None
    return parsed.isoweekday() % 7


def weekday_name(index: Optional[int]) -> Optional[str]:
    """English weekday name for a Sunday=0 index."""
    if index is None:
        return None
    return WEEKDAY_NAMES[index]


def parse_hour(start_time: Optional[str]) -> Optional[int]:
    """
    Whole start hour of an HH:MM[:SS] string.

    Returns None for missing, non-numeric or out-of-range hours.

    Example:
        >>> parse_hour("09:30")
        9
        >>> parse_hour("later") is None
        True
    """
    if not start_time:
        return None
    head = start_time.strip().split(":")[0]
    # str.isdigit() also accepts Unicode digits such as "²"
    if not (head.isascii() and head.isdigit()):
        return None
    hour = int(head)
    if hour > 23:
        return None
    return hour


def resolved_hour(hour: Optional[int]) -> int:
    """Numeric hour for arithmetic, noon when unknown."""
    return FALLBACK_HOUR if hour is None else hour


# ============================================================================
# Features
# ============================================================================

def availability_ratio(session: DoctorSession) -> float:
    """
    Share of capacity still open, 1 - booked/capacity.

    A session with no capacity counts as fully booked. Overbooked sessions
    clamp to 0.
    """
    capacity = session.capacity
    if capacity <= 0:
        return 0.0
    ratio = 1.0 - session.booked_count / capacity
    return min(1.0, max(0.0, ratio))


def extract_features(
    session: DoctorSession,
    tables: PopularityTables = DEFAULT_TABLES
) -> FeatureVector:
    """
    Build the feature vector for one session.

    Args:
        session: Session to describe (not modified)
        tables: Popularity tables to look up weights in

    Returns:
        6-tuple of floats, see FEATURE_NAMES
    """
    hour = parse_hour(session.start_time)
    weekday = weekday_of(session.date)
    day_name = weekday_name(weekday)

    time_normalized = resolved_hour(hour) / 24
    day_normalized = weekday / 6 if weekday is not None else FALLBACK_DAY_FEATURE

    return (
        time_normalized,
        day_normalized,
        availability_ratio(session),
        tables.day_popularity(day_name),
        tables.hour_popularity(hour),
        tables.specialty_popularity(session.specialty),
    )
