"""
Constants Package

Centralized constants for the appointment recommendation service.

Exports:
- Role constants (ADMIN, DOCTOR, PATIENT, ANON)
- Popularity tables and scoring defaults

Safe to import anywhere - no heavy dependencies or circular imports.
"""

# Role constants
from .roles import (
    ADMIN,
    DOCTOR,
    PATIENT,
    ANON,
    ALL_ROLES,
    DEFAULT_ROLE,
    is_valid_role,
    normalize_role,
)

# Popularity constants
from .popularity import (
    HOUR_POPULARITY,
    DAY_POPULARITY,
    SPECIALTY_POPULARITY,
    TIME_OF_DAY_PREFERENCE,
    DEFAULT_HOUR_POPULARITY,
    DEFAULT_DAY_POPULARITY,
    DEFAULT_SPECIALTY_POPULARITY,
    DEFAULT_RECOMMENDATION_LIMIT,
)

__all__ = [
    # Roles
    "ADMIN",
    "DOCTOR",
    "PATIENT",
    "ANON",
    "ALL_ROLES",
    "DEFAULT_ROLE",
    "is_valid_role",
    "normalize_role",
    # Popularity
    "HOUR_POPULARITY",
    "DAY_POPULARITY",
    "SPECIALTY_POPULARITY",
    "TIME_OF_DAY_PREFERENCE",
    "DEFAULT_HOUR_POPULARITY",
    "DEFAULT_DAY_POPULARITY",
    "DEFAULT_SPECIALTY_POPULARITY",
    "DEFAULT_RECOMMENDATION_LIMIT",
]
