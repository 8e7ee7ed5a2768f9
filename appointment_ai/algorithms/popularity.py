"""
Popularity Tables

Lookup-with-fallback access to the static popularity weights.

Every table is a constructor argument so a recommender can be built with
personalized or test tables without touching module globals.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from appointment_ai.constants.popularity import (
    HOUR_POPULARITY,
    DEFAULT_HOUR_POPULARITY,
    DAY_POPULARITY,
    DEFAULT_DAY_POPULARITY,
    DEFAULT_DAY_SCORE_FACTOR,
    SPECIALTY_POPULARITY,
    DEFAULT_SPECIALTY_POPULARITY,
    TIME_OF_DAY_PREFERENCE,
    MORNING,
    AFTERNOON,
    EVENING,
    MORNING_END_HOUR,
    EVENING_START_HOUR,
    DEFAULT_TIME_OF_DAY,
)


@dataclass(frozen=True)
class PopularityTables:
    """
    Static weights consulted by feature extraction and scoring.

    Attributes:
        hours: Hour of day (int) -> popularity
        days: Weekday name -> popularity
        specialties: Provider specialization -> popularity
        time_of_day: Bucket name (morning/afternoon/evening) -> user preference
    """
    hours: Mapping[int, float] = field(default_factory=lambda: HOUR_POPULARITY)
    days: Mapping[str, float] = field(default_factory=lambda: DAY_POPULARITY)
    specialties: Mapping[str, float] = field(default_factory=lambda: SPECIALTY_POPULARITY)
    time_of_day: Mapping[str, float] = field(default_factory=lambda: TIME_OF_DAY_PREFERENCE)
    default_hour: float = DEFAULT_HOUR_POPULARITY
    default_day: float = DEFAULT_DAY_POPULARITY
    default_day_factor: float = DEFAULT_DAY_SCORE_FACTOR
    default_specialty: float = DEFAULT_SPECIALTY_POPULARITY

    def __post_init__(self):
        # Read-only copies; instances share no mutable state with callers
        for name in ("hours", "days", "specialties", "time_of_day"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def hour_popularity(self, hour: Optional[int]) -> float:
        """Popularity of a whole start hour; default for hours outside the table."""
        if hour is None:
            return self.default_hour
        return self.hours.get(hour, self.default_hour)

    def day_popularity(self, day_name: Optional[str]) -> float:
        """Popularity of a weekday, as used in the feature vector."""
        if day_name is None:
            return self.default_day
        return self.days.get(day_name, self.default_day)

    def day_score_factor(self, day_name: Optional[str]) -> float:
        """Popularity of a weekday, as used by the scorer."""
        if day_name is None:
            return self.default_day_factor
        return self.days.get(day_name, self.default_day_factor)

    def specialty_popularity(self, specialty: Optional[str]) -> float:
        """Popularity of a specialization; neutral default when unknown or absent."""
        if not specialty:
            return self.default_specialty
        return self.specialties.get(specialty, self.default_specialty)

    def time_preference(self, hour: Optional[int]) -> float:
        """User preference for the time-of-day bucket containing hour."""
        bucket = time_of_day_bucket(hour)
        return self.time_of_day.get(bucket, TIME_OF_DAY_PREFERENCE[bucket])


def time_of_day_bucket(hour: Optional[int]) -> str:
    """
    Bucket a start hour into morning / afternoon / evening.

    Example:
        >>> time_of_day_bucket(9)
        'morning'
        >>> time_of_day_bucket(17)
        'evening'
    """
    if hour is None:
        return DEFAULT_TIME_OF_DAY
    if hour < MORNING_END_HOUR:
        return MORNING
    if hour >= EVENING_START_HOUR:
        return EVENING
    return AFTERNOON


DEFAULT_TABLES = PopularityTables()
