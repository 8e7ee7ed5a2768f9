"""
Service plumbing shared by every layer: settings, trace-aware logging,
application errors and caller access checks.
"""

from appointment_ai.core.config import settings, get_settings
from appointment_ai.core.logging import setup_logging, set_trace_id, get_trace_id
from appointment_ai.core.errors import (
    AppError,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
    error_payload,
    from_status_code,
    to_http_exception,
)
from appointment_ai.core.security import (
    require_auth,
    require_role,
    require_patient_access,
)

__all__ = [
    "settings",
    "get_settings",
    "setup_logging",
    "set_trace_id",
    "get_trace_id",
    "AppError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServiceUnavailableError",
    "error_payload",
    "from_status_code",
    "to_http_exception",
    "require_auth",
    "require_role",
    "require_patient_access",
]
