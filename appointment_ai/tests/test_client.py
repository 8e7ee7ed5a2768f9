"""
Session Service Client Tests

Tests for the data service client against httpx.MockTransport.

Run: pytest appointment_ai/tests/test_client.py -v
"""

from datetime import date

import httpx
import pytest

from appointment_ai.core.errors import (
    NotFoundError,
    ServiceUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from appointment_ai.tools import session_service_client


# ==================== Fixtures ====================

@pytest.fixture
def use_transport(monkeypatch):
    """Install a mock transport; returns the list of captured requests."""
    captured = []

    def _install(handler):
        def _record(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return handler(request)

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(_record),
            base_url="http://data.test"
        )
        monkeypatch.setattr(session_service_client, "_client", client)
        return captured

    return _install


SESSION_ROWS = [
    {
        "id": 11,
        "doctor_id": "doc-1",
        "date": "2024-06-04",
        "start_time": "09:00",
        "end_time": "12:00",
        "max_patients": 6,
        "patients_booked": 2,
        "is_available": True,
        "doctor": {"id": "doc-1", "full_name": "Grace Hopper", "specialization": "Neurology"},
    },
    {
        "doctor_id": "doc-2",
        "date": "2024-06-05",
        "start_time": "14:00",
    },
    {
        "id": "bad-capacity",
        "date": "2024-06-05",
        "max_patients": -3,
    },
]


# ==================== Available Sessions ====================

@pytest.mark.asyncio
async def test_get_available_sessions_builds_query(use_transport):
    captured = use_transport(lambda request: httpx.Response(200, json=SESSION_ROWS))

    sessions = await session_service_client.get_available_sessions(
        date_from="2024-06-02",
        date_to="2024-06-15",
        auth_header="Bearer patient-token",
        request_id="abcd1234"
    )

    request = captured[0]
    assert request.url.path == "/rest/v1/doctor_sessions"
    assert request.url.params.get_list("date") == ["gte.2024-06-02", "lte.2024-06-15"]
    assert request.url.params["is_available"] == "eq.true"
    assert request.url.params["order"] == "date.asc,start_time.asc"
    assert request.url.params["limit"] == "50"
    assert request.headers["authorization"] == "Bearer patient-token"
    assert request.headers["x-request-id"] == "abcd1234"

    # Row without id and row failing validation are dropped
    assert [s.id for s in sessions] == ["11"]
    assert sessions[0].specialty == "Neurology"
    assert sessions[0].capacity == 6


@pytest.mark.asyncio
async def test_get_available_sessions_accepts_wrapped_rows(use_transport):
    use_transport(lambda request: httpx.Response(200, json={"data": SESSION_ROWS[:1]}))

    sessions = await session_service_client.get_available_sessions("2024-06-02", "2024-06-15", limit=5)

    assert len(sessions) == 1


@pytest.mark.asyncio
async def test_service_key_used_without_caller_token(use_transport, monkeypatch):
    monkeypatch.setenv("DATA_SERVICE_API_KEY", "service-key")
    captured = use_transport(lambda request: httpx.Response(200, json=[]))

    await session_service_client.get_available_sessions("2024-06-02", "2024-06-15")

    assert captured[0].headers["apikey"] == "service-key"
    assert captured[0].headers["authorization"] == "Bearer service-key"


# ==================== Patient History ====================

@pytest.mark.asyncio
async def test_get_patient_history_attaches_doctor(use_transport):
    rows = [
        {
            "id": "appt-2",
            "patient_id": "patient-001",
            "status": "completed",
            "doctor": {"id": "doc-3", "full_name": "Mary Jackson", "specialization": "Orthopedics"},
            "session": {"id": "s-2", "doctor_id": "doc-3", "date": "2024-05-20", "start_time": "10:00"},
        },
        {
            "id": "appt-1",
            "patient_id": "patient-001",
            "status": "cancelled",
            "doctor": None,
            "session": None,
        },
    ]
    captured = use_transport(lambda request: httpx.Response(200, json=rows))

    history = await session_service_client.get_patient_history("patient-001")

    params = captured[0].url.params
    assert captured[0].url.path == "/rest/v1/appointments"
    assert params["patient_id"] == "eq.patient-001"
    assert params["status"] == "neq.scheduled"
    assert params["order"] == "created_at.desc"
    assert params["limit"] == "5"

    assert [s.id for s in history] == ["s-2"]
    assert history[0].specialty == "Orthopedics"


# ==================== Error Mapping ====================

@pytest.mark.asyncio
@pytest.mark.parametrize("status_code,error_class", [
    (400, ValidationError),
    (401, UnauthorizedError),
    (404, NotFoundError),
    (500, ServiceUnavailableError),
    (502, ServiceUnavailableError),
])
async def test_backend_status_mapping(use_transport, status_code, error_class):
    use_transport(lambda request: httpx.Response(status_code, json={"message": "nope"}))

    with pytest.raises(error_class) as exc_info:
        await session_service_client.get_available_sessions("2024-06-02", "2024-06-15")

    if status_code >= 500:
        assert exc_info.value.details["upstream_status"] == status_code


@pytest.mark.asyncio
async def test_connection_error_is_service_unavailable(use_transport):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    use_transport(refuse)

    with pytest.raises(ServiceUnavailableError) as exc_info:
        await session_service_client.get_patient_history("patient-001")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_invalid_json_is_service_unavailable(use_transport):
    use_transport(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    with pytest.raises(ServiceUnavailableError):
        await session_service_client.get_available_sessions("2024-06-02", "2024-06-15")


# ==================== Window and Lifecycle ====================

def test_default_window():
    assert session_service_client.default_window(date(2024, 6, 1)) == ("2024-06-02", "2024-06-15")


def test_default_window_follows_lookahead(monkeypatch):
    monkeypatch.setenv("LOOKAHEAD_DAYS", "7")

    assert session_service_client.default_window(date(2024, 12, 28)) == ("2024-12-29", "2025-01-04")


@pytest.mark.asyncio
async def test_aclose_client_resets_singleton():
    client = session_service_client.get_client()
    assert session_service_client.get_client() is client

    await session_service_client.aclose_client()

    assert client.is_closed
    assert session_service_client._client is None


# ==================== Run Tests ====================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
