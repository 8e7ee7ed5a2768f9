"""
Access checks for the recommendation endpoints.

Tokens are issued and verified by the external auth backend. This service
only requires that a caller sends credentials, forwards them to the data
service, and decides from the caller's role whose recommendations they may
read.

    require_auth(auth_header)
    role = require_patient_access(user_role, user_id, patient_id)
"""

import logging
from typing import Iterable, Optional

from appointment_ai.constants.roles import ADMIN, PATIENT, normalize_role
from appointment_ai.core.errors import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)


def require_auth(auth_header: Optional[str]) -> str:
    """
    Return auth_header, raising UnauthorizedError when it is missing or blank.
    """
    if auth_header is None or not auth_header.strip():
        reason = "Missing Authorization header" if auth_header is None else "Empty Authorization header"
        raise UnauthorizedError(details={"reason": reason})
    return auth_header


def require_role(user_role: Optional[str], allowed_roles: Iterable[str]) -> str:
    """
    Normalized role of the caller.

    Raises:
        UnauthorizedError: No role given
        ForbiddenError: Role not among allowed_roles
    """
    if not user_role or not user_role.strip():
        raise UnauthorizedError("Role required", details={"reason": "Missing user role"})

    allowed = list(allowed_roles)
    role = normalize_role(user_role)
    if role not in allowed:
        logger.warning(f"Access denied: role '{role}' not in {allowed}")
        raise ForbiddenError(
            "Insufficient permissions",
            details={"user_role": role, "allowed_roles": allowed}
        )
    return role


def require_patient_access(
    user_role: Optional[str],
    user_id: Optional[str],
    patient_id: str
) -> str:
    """
    Admins may read any patient's recommendations, patients only their own.

    Returns:
        The normalized role
    """
    role = require_role(user_role, [ADMIN, PATIENT])

    if role == PATIENT and str(user_id or "") != str(patient_id):
        logger.warning(f"Patient {user_id} requested recommendations for {patient_id}")
        raise ForbiddenError(
            "Patients can only view their own recommendations",
            details={"patient_id": patient_id}
        )

    return role
