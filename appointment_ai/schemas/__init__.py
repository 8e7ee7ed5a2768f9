"""
Pydantic Schemas Package

Typed request/response models for the recommendation service.

Schema Conventions:
- Responses: {message: str, data: dict, proofs: Proofs}
- Sessions: backend rows from doctor_sessions with the doctor profile joined

Export Groups:
- Base: Proofs, AgentResponse
- Session: DoctorProfile, DoctorSession
- Recommend: request bodies and ranked results
"""

# Base schemas
from appointment_ai.schemas.base import (
    Proofs,
    AgentResponse
)

# Session schemas
from appointment_ai.schemas.session import (
    DoctorProfile,
    DoctorSession
)

# Recommendation schemas
from appointment_ai.schemas.recommend import (
    RankRequest,
    ScoreRequest,
    RankedSession,
    SessionScore,
    RecommendationResult,
    RecommendationResponse
)

__all__ = [
    # Base
    "Proofs",
    "AgentResponse",
    # Session
    "DoctorProfile",
    "DoctorSession",
    # Recommend
    "RankRequest",
    "ScoreRequest",
    "RankedSession",
    "SessionScore",
    "RecommendationResult",
    "RecommendationResponse"
]
