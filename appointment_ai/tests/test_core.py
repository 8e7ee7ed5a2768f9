"""
Core Tests

Tests for config, logging, error mapping and access checks.

Run: pytest appointment_ai/tests/test_core.py -v
"""

import logging

import pytest

from appointment_ai.constants.roles import ADMIN, PATIENT, is_valid_role, normalize_role
from appointment_ai.core.config import get_settings, settings
from appointment_ai.core.errors import (
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
    UnauthorizedError,
    ValidationError,
    error_payload,
    from_status_code,
    to_http_exception,
)
from appointment_ai.core.logging import (
    TraceIdFilter,
    get_trace_id,
    set_trace_id,
    setup_logging,
)
from appointment_ai.core.security import (
    require_auth,
    require_patient_access,
    require_role,
)


# ==================== Config ====================

def test_settings_defaults(monkeypatch):
    for name in ("RECOMMENDATION_LIMIT", "HISTORY_LIMIT", "LOOKAHEAD_DAYS", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    assert get_settings() is settings
    assert settings.RECOMMENDATION_LIMIT == 3
    assert settings.HISTORY_LIMIT == 5
    assert settings.LOOKAHEAD_DAYS == 14
    assert settings.CORS_ORIGINS == ["*"]


# ==================== Logging ====================

def test_trace_id_filter_tags_records():
    set_trace_id("trace-filter")
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    assert TraceIdFilter().filter(record) is True
    assert record.trace_id == "trace-filter"
    assert get_trace_id() == "trace-filter"


def test_setup_logging_installs_trace_filter():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        setup_logging("DEBUG", force=True)

        assert len(root.handlers) == 1
        assert any(isinstance(f, TraceIdFilter) for f in root.handlers[0].filters)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


# ==================== Errors ====================

@pytest.mark.parametrize("status_code,error_class", [
    (400, ValidationError),
    (422, ValidationError),
    (401, UnauthorizedError),
    (403, ForbiddenError),
    (404, NotFoundError),
    (503, ServiceUnavailableError),
])
def test_from_status_code(status_code, error_class):
    assert isinstance(from_status_code(status_code), error_class)


def test_error_codes_and_payload():
    assert NotFoundError().to_dict(trace_id="t1") == {
        "code": "not_found",
        "message": "Resource not found",
        "trace_id": "t1",
    }
    assert error_payload("bad_request", "Invalid input") == {"code": "bad_request", "message": "Invalid input"}


def test_to_http_exception_uses_current_trace():
    set_trace_id("trace-http")

    exc = to_http_exception(ForbiddenError("No access"))

    assert exc.status_code == 403
    assert exc.detail["code"] == "forbidden"
    assert exc.detail["trace_id"] == "trace-http"


# ==================== Security ====================

def test_require_auth():
    assert require_auth("Bearer abc") == "Bearer abc"

    with pytest.raises(UnauthorizedError):
        require_auth(None)
    with pytest.raises(UnauthorizedError):
        require_auth("   ")


def test_role_checks():
    assert normalize_role(" patient ") == PATIENT
    assert normalize_role("wizard") == "ANON"
    assert is_valid_role("doctor")
    assert not is_valid_role("wizard")


def test_require_role():
    assert require_role("admin", [ADMIN, PATIENT]) == ADMIN

    with pytest.raises(UnauthorizedError):
        require_role("", [ADMIN])
    with pytest.raises(ForbiddenError):
        require_role("DOCTOR", [ADMIN, PATIENT])


def test_require_patient_access():
    assert require_patient_access("PATIENT", "p-1", "p-1") == PATIENT
    assert require_patient_access("ADMIN", None, "p-1") == ADMIN

    with pytest.raises(ForbiddenError):
        require_patient_access("PATIENT", "p-2", "p-1")
    with pytest.raises(ForbiddenError):
        require_patient_access("ANON", None, "p-1")


# ==================== Run Tests ====================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
