"""
Popularity Constants

Static weights used by the appointment recommender.

IMPORTANT: These values are configuration, not learned state. They are the
defaults for algorithms.popularity.PopularityTables and can be replaced per
instance without touching this module.

SYNC WITH: appointment_ai/algorithms/popularity.py, appointment_ai/algorithms/appointment_recommender.py
"""

# ============================================================================
# Hour-of-day Popularity (08:00 - 18:00)
# ============================================================================

HOUR_POPULARITY = {
    8: 0.7,    # Early morning - moderately popular
    9: 0.8,
    10: 0.9,   # Late morning - most popular
    11: 0.85,
    12: 0.6,   # Lunch time - less popular
    13: 0.65,
    14: 0.75,
    15: 0.8,
    16: 0.85,  # Late afternoon - popular
    17: 0.7,
    18: 0.5,   # Evening - least popular
}

# Hours outside the table
DEFAULT_HOUR_POPULARITY = 0.5


# ============================================================================
# Day-of-week Popularity
# ============================================================================

DAY_POPULARITY = {
    "Monday": 0.8,
    "Tuesday": 0.7,
    "Wednesday": 0.75,
    "Thursday": 0.8,
    "Friday": 0.65,
    "Saturday": 0.9,
    "Sunday": 0.5,
}

# Only reachable for a date that cannot be parsed.
# Feature vector component and scorer factor use different fallbacks.
DEFAULT_DAY_POPULARITY = 0.5
DEFAULT_DAY_SCORE_FACTOR = 0.7

# Sunday=0 .. Saturday=6
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


# ============================================================================
# Specialty Popularity
# ============================================================================

SPECIALTY_POPULARITY = {
    "General Medicine": 0.75,
    "Pediatrics": 0.8,
    "Cardiology": 0.85,
    "Dermatology": 0.7,
    "Orthopedics": 0.8,
    "Neurology": 0.75,
    "Gynecology": 0.7,
    "Ophthalmology": 0.65,
    "ENT": 0.6,
    "Psychiatry": 0.7,
    "Oncology": 0.8,
    "Urology": 0.65,
    "Dentistry": 0.7,
    "Endocrinology": 0.75,
}

# Unknown or absent specialty
DEFAULT_SPECIALTY_POPULARITY = 0.7


# ============================================================================
# Time-of-day Preference
# ============================================================================

MORNING = "morning"
AFTERNOON = "afternoon"
EVENING = "evening"

TIME_OF_DAY_PREFERENCE = {
    MORNING: 0.8,    # start hour < 12
    AFTERNOON: 0.6,  # 12 <= start hour < 17
    EVENING: 0.4,    # start hour >= 17
}

MORNING_END_HOUR = 12
EVENING_START_HOUR = 17

# Unparseable start time falls into this bucket
DEFAULT_TIME_OF_DAY = AFTERNOON


# ============================================================================
# Scoring Parameters
# ============================================================================

# Numeric stand-in for an unparseable start hour (noon)
FALLBACK_HOUR = 12

# Day feature for an unparseable date (mid-week)
FALLBACK_DAY_FEATURE = 0.5

# History index i is weighted exp(i / RECENCY_DECAY), oldest first
RECENCY_DECAY = 10.0

# Diversity is enforced until the result holds this share of the limit
DIVERSITY_RATIO = 0.75

DEFAULT_RECOMMENDATION_LIMIT = 3
