"""
Session Data Service HTTP Client

Provides async access to the external data backend (PostgREST-compatible,
e.g. Supabase) for bookable doctor sessions and a patient's completed
appointments. Uses a module-level singleton AsyncClient for connection pooling.

Functions:
- get_available_sessions: Open sessions in a date window, doctor profile joined
- get_patient_history: Sessions of a patient's most recent completed appointments
- default_window: Tomorrow .. today + LOOKAHEAD_DAYS
- aclose_client: Close HTTP client (call during shutdown)

Backend failures are raised as core.errors.AppError subclasses with safe messages.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError as SchemaValidationError

from appointment_ai.core.config import settings
from appointment_ai.core.errors import (
    ServiceUnavailableError,
    from_status_code,
)
from appointment_ai.schemas.session import DoctorSession

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration
# ============================================================================

SESSIONS_PATH = "/rest/v1/doctor_sessions"
APPOINTMENTS_PATH = "/rest/v1/appointments"

SESSION_SELECT = "*,doctor:doctor_id(*)"
APPOINTMENT_SELECT = "*,doctor:doctor_id(*),session:session_id(*)"

# Appointments still ahead are not history
SCHEDULED_STATUS = "scheduled"


# ============================================================================
# Module-level HTTP Client
# ============================================================================

_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    """Get or create module-level httpx.AsyncClient singleton."""
    global _client

    if _client is None or _client.is_closed:
        limits = httpx.Limits(
            max_connections=settings.DATA_CLIENT_MAX_CONNECTIONS,
            max_keepalive_connections=settings.DATA_CLIENT_MAX_KEEPALIVE
        )

        _client = httpx.AsyncClient(
            base_url=settings.DATA_SERVICE_URL,
            timeout=settings.DATA_CLIENT_TIMEOUT,
            limits=limits,
            follow_redirects=False
        )
        logger.info(f"Initialized data service httpx.AsyncClient for {settings.DATA_SERVICE_URL}")

    return _client


async def aclose_client() -> None:
    """Close module-level httpx.AsyncClient gracefully."""
    global _client

    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.info("Closed data service httpx.AsyncClient")
    _client = None


# ============================================================================
# Helpers
# ============================================================================

def _build_headers(
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> Dict[str, str]:
    """Build request headers; the caller's token wins over the service key."""
    headers = {
        "Accept": "application/json",
    }

    api_key = settings.DATA_SERVICE_API_KEY
    if api_key:
        headers["apikey"] = api_key

    if auth_header:
        headers["Authorization"] = auth_header
    elif api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    if request_id:
        headers["x-request-id"] = request_id

    return headers


def default_window(today: Optional[date] = None) -> Tuple[str, str]:
    """
    Candidate date window, tomorrow through LOOKAHEAD_DAYS from today.

    Example:
        >>> default_window(date(2024, 6, 1))
        ('2024-06-02', '2024-06-15')
    """
    today = today or date.today()
    date_from = today + timedelta(days=1)
    date_to = today + timedelta(days=settings.LOOKAHEAD_DAYS)
    return date_from.isoformat(), date_to.isoformat()


def _extract_rows(data: Any) -> List[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get("data") or []
    return []


def _normalize_session(row: Any, doctor: Any = None) -> Optional[DoctorSession]:
    """
    Convert a backend row into a DoctorSession.

    Returns None for rows that are not objects, lack an id or fail validation.
    """
    if not isinstance(row, dict) or not row.get("id"):
        return None

    payload = dict(row)
    payload["id"] = str(row["id"])
    if doctor and not payload.get("doctor"):
        payload["doctor"] = doctor

    try:
        return DoctorSession.model_validate(payload)
    except SchemaValidationError as e:
        logger.warning(f"Skipping malformed session {payload['id']}: {e.error_count()} validation errors")
        return None


async def _get_rows(
    path: str,
    params: List[Tuple[str, str]],
    auth_header: Optional[str],
    request_id: Optional[str]
) -> List[Any]:
    """GET a PostgREST collection and return its rows."""
    headers = _build_headers(auth_header, request_id)

    try:
        client = get_client()
        response = await client.get(path, params=params, headers=headers)
        response.raise_for_status()
        return _extract_rows(response.json())

    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        logger.warning(f"Data service error {status_code} on {path}: {e.response.text[:200]}")
        raise from_status_code(status_code) from e
    except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
        logger.error(f"Data service connection error: {type(e).__name__}: {e}")
        raise ServiceUnavailableError(
            f"Cannot connect to data service: {type(e).__name__}"
        ) from e
    except ValueError as e:
        logger.error(f"Data service returned invalid JSON on {path}: {e}")
        raise ServiceUnavailableError("Data service returned an invalid response") from e


# ============================================================================
# Public API
# ============================================================================

async def get_available_sessions(
    date_from: str,
    date_to: str,
    limit: Optional[int] = None,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> List[DoctorSession]:
    """
    Get open sessions between two dates (inclusive).

    Args:
        date_from: First date (YYYY-MM-DD)
        date_to: Last date (YYYY-MM-DD)
        limit: Maximum rows, defaults to CANDIDATE_LIMIT
        auth_header: Optional Authorization header
        request_id: Optional request ID

    Returns:
        Sessions ordered by date and start time

    Raises:
        AppError: On backend errors
    """
    limit = limit or settings.CANDIDATE_LIMIT
    params = [
        ("select", SESSION_SELECT),
        ("date", f"gte.{date_from}"),
        ("date", f"lte.{date_to}"),
        ("is_available", "eq.true"),
        ("order", "date.asc,start_time.asc"),
        ("limit", str(limit)),
    ]

    logger.debug(f"Fetching available sessions from {date_from} to {date_to}")
    rows = await _get_rows(SESSIONS_PATH, params, auth_header, request_id)

    sessions = [s for s in (_normalize_session(row) for row in rows) if s is not None]
    logger.info(f"Retrieved {len(sessions)} available sessions (filtered from {len(rows)} rows)")
    return sessions


async def get_patient_history(
    patient_id: str,
    limit: Optional[int] = None,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> List[DoctorSession]:
    """
    Get sessions of a patient's most recent non-scheduled appointments.

    The appointment's doctor profile is attached to its session so history
    entries carry a specialty.

    Args:
        patient_id: Patient identifier
        limit: Maximum appointments, defaults to HISTORY_LIMIT
        auth_header: Optional Authorization header
        request_id: Optional request ID

    Returns:
        Sessions, most recently created appointment first

    Raises:
        AppError: On backend errors
    """
    limit = limit or settings.HISTORY_LIMIT
    params = [
        ("select", APPOINTMENT_SELECT),
        ("patient_id", f"eq.{patient_id}"),
        ("status", f"neq.{SCHEDULED_STATUS}"),
        ("order", "created_at.desc"),
        ("limit", str(limit)),
    ]

    logger.debug(f"Fetching appointment history for patient {patient_id}")
    rows = await _get_rows(APPOINTMENTS_PATH, params, auth_header, request_id)

    history = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        session = _normalize_session(row.get("session"), doctor=row.get("doctor"))
        if session is not None:
            history.append(session)

    logger.info(f"Retrieved {len(history)} history sessions for patient {patient_id}")
    return history


__all__ = [
    "get_available_sessions",
    "get_patient_history",
    "default_window",
    "aclose_client",
]
