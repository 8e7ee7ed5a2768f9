"""
Application errors.

Raised by the collaborator layers only: the data service client, the access
checks and the HTTP endpoints. The recommendation engine never raises.

Each subclass fixes its HTTP status and error code:

    raise ServiceUnavailableError("Data service unreachable", details={"url": url})
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base application error.

    Attributes:
        message: Safe, user-facing text
        code: Machine-readable code (e.g. "forbidden")
        details: Extra context for logs and clients
        status_code: HTTP status to answer with
    """

    status_code = 500
    code = "app_error"
    default_message = "Application error"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self, trace_id: Optional[str] = None) -> Dict[str, Any]:
        return error_payload(self.code, self.message, self.details, trace_id)


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"
    default_message = "Validation failed"


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """A caller reaching for data that is not theirs, e.g. another patient's history."""
    status_code = 403
    code = "forbidden"
    default_message = "Access forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ServiceUnavailableError(AppError):
    """The data service is unreachable or answered with a server error."""
    status_code = 503
    code = "service_unavailable"
    default_message = "Service temporarily unavailable"


def error_payload(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Body of an error response; empty details and trace_id are left out.

    Example:
        >>> error_payload("forbidden", "No access", trace_id="abc123")
        {'code': 'forbidden', 'message': 'No access', 'trace_id': 'abc123'}
    """
    payload: Dict[str, Any] = {"code": code, "message": message}
    if details:
        payload["details"] = details
    if trace_id:
        payload["trace_id"] = trace_id
    return payload


def from_status_code(status_code: int, service: str = "Data service") -> AppError:
    """
    Translate an upstream HTTP status into an AppError.

    Upstream bodies are never forwarded. Anything not a known client error
    is reported as the service being unavailable.

    Example:
        >>> from_status_code(404).status_code
        404
        >>> from_status_code(502).code
        'service_unavailable'
    """
    if status_code in (400, 422):
        return ValidationError("Invalid request")
    known = {401: UnauthorizedError, 403: ForbiddenError, 404: NotFoundError}
    if status_code in known:
        return known[status_code]()
    return ServiceUnavailableError(
        f"{service} unavailable",
        details={"upstream_status": status_code}
    )


def to_http_exception(error: AppError):
    """FastAPI HTTPException for error, tagged with the current trace id."""
    from fastapi import HTTPException
    from appointment_ai.core.logging import NO_TRACE, get_trace_id

    trace_id = get_trace_id()
    return HTTPException(
        status_code=error.status_code,
        detail=error.to_dict(trace_id=None if trace_id == NO_TRACE else trace_id)
    )
