import sys
from pathlib import Path
from typing import Optional

import pytest

# Add the project root to sys.path so that "appointment_ai" can be found
# structure: <root>/appointment_ai/tests/conftest.py

current_dir = Path(__file__).parent.absolute()
root_dir = current_dir.parent.parent
sys.path.insert(0, str(root_dir))


@pytest.fixture
def make_session():
    """Factory for DoctorSession objects with sensible defaults."""
    from appointment_ai.schemas.session import DoctorSession

    counter = {"n": 0}

    def _make(
        start_time: Optional[str] = "10:00",
        date: str = "2024-06-03",  # Monday
        specialty: Optional[str] = None,
        booked: int = 0,
        capacity: int = 4,
        session_id: Optional[str] = None,
        **extra
    ) -> DoctorSession:
        counter["n"] += 1
        payload = {
            "id": session_id or f"session-{counter['n']:03d}",
            "doctor_id": "doctor-001",
            "date": date,
            "start_time": start_time,
            "end_time": None,
            "max_patients": capacity,
            "patients_booked": booked,
            **extra,
        }
        if specialty is not None:
            payload["doctor"] = {
                "id": "doctor-001",
                "full_name": "Ada Lovelace",
                "specialization": specialty,
            }
        return DoctorSession.model_validate(payload)

    return _make
