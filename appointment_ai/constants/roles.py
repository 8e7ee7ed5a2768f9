"""
Caller roles.

The API layer passes the caller's role (x-user-role header) to the agent;
only admins and the patient themselves may see a patient's recommendations.
Doctors manage their sessions elsewhere and have no access here.
"""

from typing import Optional

ADMIN = "ADMIN"
DOCTOR = "DOCTOR"
PATIENT = "PATIENT"
ANON = "ANON"

ALL_ROLES = frozenset({ADMIN, DOCTOR, PATIENT, ANON})

# Missing or unknown roles are treated as anonymous
DEFAULT_ROLE = ANON


def is_valid_role(role: Optional[str]) -> bool:
    """
    Case-insensitive membership in ALL_ROLES.

    Example:
        >>> is_valid_role("patient")
        True
    """
    if not isinstance(role, str):
        return False
    return role.strip().upper() in ALL_ROLES


def normalize_role(role: Optional[str]) -> str:
    """
    Upper-cased role, DEFAULT_ROLE for anything unrecognised.

    Example:
        >>> normalize_role(" doctor ")
        'DOCTOR'
        >>> normalize_role("wizard")
        'ANON'
    """
    if not is_valid_role(role):
        return DEFAULT_ROLE
    return role.strip().upper()
