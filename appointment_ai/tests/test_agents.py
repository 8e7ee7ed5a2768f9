"""
Agent Tests

Tests for AppointmentRecommendationAgent with mocked data service calls.
Uses pytest monkeypatch to replace session_service_client functions.

Run: pytest appointment_ai/tests/test_agents.py -v
"""

import pytest

from appointment_ai.agents.recommendation_agent import (
    ALGORITHM_NAME,
    AppointmentRecommendationAgent,
)
from appointment_ai.core.errors import ForbiddenError, ServiceUnavailableError
from appointment_ai.tools import session_service_client


# ==================== Fixtures ====================

@pytest.fixture
def context_base():
    """Base context for agent execution."""
    return {
        "trace_id": "trace123456",
        "auth_header": "Bearer test_token",
        "user_role": "PATIENT",
        "user_id": "patient-001",
        "entities": {"patient_id": "patient-001"},
    }


@pytest.fixture
def open_sessions(make_session):
    return [
        make_session(start_time="18:00", date="2024-06-04", specialty="Pediatrics", booked=3, session_id="evening"),
        make_session(start_time="10:00", date="2024-06-04", specialty="Pediatrics", session_id="morning"),
        make_session(start_time="14:00", date="2024-06-05", specialty="Dermatology", booked=1, session_id="afternoon"),
        make_session(start_time="09:00", date="2024-06-06", specialty="Cardiology", session_id="early"),
    ]


@pytest.fixture
def patient_history(make_session):
    return [
        make_session(start_time="09:00", date="2024-05-20", specialty="Cardiology", session_id="past-1"),
        make_session(start_time="09:30", date="2024-05-13", specialty="Cardiology", session_id="past-2"),
    ]


@pytest.fixture
def mock_backend(monkeypatch, open_sessions, patient_history):
    """Replace data service calls and record their arguments."""
    calls = {}

    async def fake_sessions(date_from, date_to, limit=None, auth_header=None, request_id=None):
        calls["sessions"] = {"date_from": date_from, "date_to": date_to, "auth_header": auth_header}
        return open_sessions

    async def fake_history(patient_id, limit=None, auth_header=None, request_id=None):
        calls["history"] = {"patient_id": patient_id, "auth_header": auth_header}
        return patient_history

    monkeypatch.setattr(session_service_client, "get_available_sessions", fake_sessions)
    monkeypatch.setattr(session_service_client, "get_patient_history", fake_history)
    return calls


# ==================== Success Paths ====================

@pytest.mark.asyncio
async def test_agent_recommends_sessions(context_base, mock_backend):
    agent = AppointmentRecommendationAgent()

    result = await agent.execute(context_base)

    assert result["proofs"]["status"] == "success"
    assert result["proofs"]["algorithm"] == ALGORITHM_NAME
    assert result["proofs"]["user_role"] == "PATIENT"
    assert result["proofs"]["trace_id"] == "trace123456"

    data = result["data"]
    assert data["patient_id"] == "patient-001"
    assert data["total_candidates"] == 4
    assert data["history_count"] == 2
    assert data["limit"] == 3
    assert len(data["recommended"]) == 3
    assert [item["rank"] for item in data["recommended"]] == [1, 2, 3]

    scores = [item["score"] for item in data["recommended"]]
    assert all(0 < s < 1 for s in scores)

    ids = [item["session"]["id"] for item in data["recommended"]]
    assert "evening" not in ids
    assert "recommended appointment" in result["message"]

    assert mock_backend["sessions"]["auth_header"] == "Bearer test_token"
    assert mock_backend["history"]["patient_id"] == "patient-001"


@pytest.mark.asyncio
async def test_agent_uses_default_window(context_base, mock_backend, monkeypatch):
    monkeypatch.setattr(session_service_client, "default_window", lambda: ("2024-06-02", "2024-06-15"))

    await AppointmentRecommendationAgent().execute(context_base)

    assert mock_backend["sessions"]["date_from"] == "2024-06-02"
    assert mock_backend["sessions"]["date_to"] == "2024-06-15"


@pytest.mark.asyncio
async def test_agent_honours_explicit_window_and_limit(context_base, mock_backend):
    context_base["entities"].update({"date_from": "2024-07-01", "date_to": "2024-07-07", "limit": "1"})

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert mock_backend["sessions"]["date_from"] == "2024-07-01"
    assert mock_backend["sessions"]["date_to"] == "2024-07-07"
    assert result["data"]["limit"] == 1
    assert len(result["data"]["recommended"]) == 1


@pytest.mark.asyncio
async def test_agent_zero_limit_returns_empty(context_base, mock_backend):
    context_base["entities"]["limit"] = 0

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["status"] == "success"
    assert result["data"]["recommended"] == []
    assert "No open sessions" in result["message"]


@pytest.mark.asyncio
async def test_admin_can_view_any_patient(context_base, mock_backend):
    context_base.update({"user_role": "admin", "user_id": "admin-001"})

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["status"] == "success"
    assert result["proofs"]["user_role"] == "ADMIN"


# ==================== Error Paths ====================

@pytest.mark.asyncio
async def test_agent_requires_auth(context_base, mock_backend):
    context_base["auth_header"] = None

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["status"] == "failed"
    assert result["data"]["status_code"] == 401
    assert "sessions" not in mock_backend


@pytest.mark.asyncio
async def test_agent_requires_patient_id(context_base, mock_backend):
    context_base["entities"] = {}

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["validation"] == "failed"
    assert result["data"]["missing_field"] == "patient_id"
    assert result["data"]["status_code"] == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", ["many", -1, 500])
async def test_agent_rejects_invalid_limit(context_base, mock_backend, limit):
    context_base["entities"]["limit"] = limit

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["status"] == "failed"
    assert result["data"]["missing_field"] == "limit"


@pytest.mark.asyncio
async def test_patient_cannot_view_other_patient(context_base, mock_backend):
    context_base["user_id"] = "patient-999"

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["status"] == "failed"
    assert result["data"]["status_code"] == 403
    assert result["data"]["error_type"] == "forbidden"
    assert "sessions" not in mock_backend


@pytest.mark.asyncio
async def test_doctor_role_is_forbidden(context_base, mock_backend):
    context_base["user_role"] = "DOCTOR"

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["data"]["status_code"] == 403


@pytest.mark.asyncio
async def test_agent_backend_unavailable(context_base, monkeypatch):
    async def failing_sessions(*args, **kwargs):
        raise ServiceUnavailableError("Cannot connect to data service: ConnectError")

    monkeypatch.setattr(session_service_client, "get_available_sessions", failing_sessions)

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["proofs"]["status"] == "failed"
    assert result["data"]["status_code"] == 503
    assert result["data"]["status"] == "backend_unavailable"
    assert result["data"]["requested_params"] == {"patient_id": "patient-001"}


@pytest.mark.asyncio
async def test_agent_passes_through_client_errors(context_base, monkeypatch, open_sessions):
    async def fake_sessions(*args, **kwargs):
        return open_sessions

    async def forbidden_history(*args, **kwargs):
        raise ForbiddenError("Data service denied access")

    monkeypatch.setattr(session_service_client, "get_available_sessions", fake_sessions)
    monkeypatch.setattr(session_service_client, "get_patient_history", forbidden_history)

    result = await AppointmentRecommendationAgent().execute(context_base)

    assert result["data"]["status_code"] == 403
    assert result["message"] == "Data service denied access"


@pytest.mark.asyncio
async def test_agent_unexpected_error_is_wrapped(context_base, mock_backend):
    class BrokenRecommender:
        def rank_sessions(self, sessions, history, limit):
            raise RuntimeError("boom")

    result = await AppointmentRecommendationAgent(recommender=BrokenRecommender()).execute(context_base)

    assert result["proofs"]["status"] == "failed"
    assert result["data"]["error_type"] == "RuntimeError"


# ==================== Run Tests ====================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
