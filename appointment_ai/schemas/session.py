"""
Session Schemas

Pydantic models for doctor sessions as returned by the data backend.

A DoctorSession is both a bookable candidate and, when taken from a
completed appointment, a history record. Scoring only reads these models.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class DoctorProfile(BaseModel):
    """
    Doctor profile embedded in a session (doctor:doctor_id(*) join).

    Only specialization is used for scoring; the rest is passed through.
    """
    id: Optional[str] = Field(None, description="Doctor identifier")
    full_name: Optional[str] = Field(None, description="Doctor display name")
    specialization: Optional[str] = Field(None, description="Provider specialty (e.g. Cardiology)")
    qualification: Optional[str] = Field(None, description="Qualification")
    experience: Optional[int] = Field(None, description="Years of experience", ge=0)

    model_config = ConfigDict(extra="allow")


class DoctorSession(BaseModel):
    """
    A time-slot session offered by a doctor.

    Required fields:
    - id, date

    start_time may be missing or malformed; the recommender falls back to
    documented defaults instead of failing.
    """
    id: str = Field(..., description="Unique session identifier")
    doctor_id: Optional[str] = Field(None, description="Doctor identifier")
    date: str = Field(..., description="Session date (YYYY-MM-DD)")
    start_time: Optional[str] = Field(None, description="Start time (HH:MM or HH:MM:SS)")
    end_time: Optional[str] = Field(None, description="End time (HH:MM or HH:MM:SS)")
    session_type: Optional[str] = Field(None, description="Session type (e.g. General Checkup)")
    max_patients: int = Field(1, description="Maximum bookings", ge=0)
    patients_booked: int = Field(0, description="Current bookings", ge=0)
    is_available: bool = Field(True, description="Open for booking")
    location: Optional[str] = Field(None, description="Session location")
    doctor: Optional[DoctorProfile] = Field(None, description="Joined doctor profile")

    model_config = ConfigDict(extra="allow")

    @property
    def capacity(self) -> int:
        return self.max_patients

    @property
    def booked_count(self) -> int:
        return self.patients_booked

    @property
    def specialty(self) -> Optional[str]:
        """Provider specialization, None when the doctor is not joined."""
        if self.doctor is None:
            return None
        return self.doctor.specialization or None

    @property
    def timeslot_key(self) -> str:
        """Date/start-time key used to detect duplicate timeslots."""
        return f"{self.date}-{self.start_time or ''}"
