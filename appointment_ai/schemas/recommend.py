"""
Recommendation Schemas

Pydantic models for the recommendation endpoints.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from appointment_ai.constants.popularity import DEFAULT_RECOMMENDATION_LIMIT
from appointment_ai.schemas.base import Proofs
from appointment_ai.schemas.session import DoctorSession


class RankRequest(BaseModel):
    """
    Request body for ranking caller-supplied sessions.

    sessions are assumed already filtered to future, open sessions;
    history to the patient's completed appointments.
    """
    sessions: List[DoctorSession] = Field(default_factory=list, description="Bookable sessions")
    history: List[DoctorSession] = Field(default_factory=list, description="Completed sessions of the patient")
    limit: int = Field(DEFAULT_RECOMMENDATION_LIMIT, description="Maximum number of recommendations")


class ScoreRequest(BaseModel):
    """Request body for scoring a single session."""
    session: DoctorSession = Field(..., description="Session to score")
    history: List[DoctorSession] = Field(default_factory=list, description="Completed sessions of the patient")


class RankedSession(BaseModel):
    """A recommended session with its relevance score."""
    rank: int = Field(..., description="1-based position", ge=1)
    score: float = Field(..., description="Relevance score in (0, 1)", gt=0, lt=1)
    session: DoctorSession = Field(..., description="Recommended session")


class SessionScore(BaseModel):
    """Score and feature breakdown of one session."""
    session_id: str = Field(..., description="Session identifier")
    score: float = Field(..., description="Relevance score in (0, 1)", gt=0, lt=1)
    features: Dict[str, float] = Field(..., description="Feature vector by component name")


class RecommendationResult(BaseModel):
    """Ranked recommendations plus the inputs they were drawn from."""
    recommended: List[RankedSession] = Field(..., description="Recommended sessions (ranked)")
    total_candidates: int = Field(..., description="Sessions considered", ge=0)
    history_count: int = Field(..., description="History entries used", ge=0)
    limit: int = Field(..., description="Requested limit")
    patient_id: Optional[str] = Field(None, description="Patient the recommendations are for")

    model_config = ConfigDict(extra="allow")


class RecommendationResponse(BaseModel):
    """Envelope for recommendation endpoints."""
    message: str = Field(..., description="Recommendation summary message")
    data: RecommendationResult = Field(..., description="Ranked recommendations")
    proofs: Proofs = Field(..., description="Tracing, sources, algorithm info")

    model_config = ConfigDict(extra="allow")
