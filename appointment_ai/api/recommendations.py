"""
Recommendations API Endpoints

Endpoints:
- POST /recommendations/rank - Rank caller-supplied sessions against a history
- POST /recommendations/score - Score one session with its feature breakdown
- GET /recommendations/patients/{patient_id} - Personalized recommendations (authenticated)

rank and score are pure computations over the request body.
The patient endpoint fetches sessions and history from the data service.
"""

import logging
import uuid
from typing import Dict, Any, Optional

from fastapi import APIRouter, Request, Query

from appointment_ai.agents.recommendation_agent import (
    ALGORITHM_NAME,
    AppointmentRecommendationAgent,
    to_ranked_sessions,
)
from appointment_ai.algorithms.appointment_recommender import get_recommender
from appointment_ai.algorithms.features import FEATURE_NAMES
from appointment_ai.core.errors import AppError, to_http_exception
from appointment_ai.core.logging import set_trace_id
from appointment_ai.schemas.base import AgentResponse
from appointment_ai.schemas.recommend import (
    RankRequest,
    RecommendationResponse,
    RecommendationResult,
    ScoreRequest,
    SessionScore,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Utilities
# ============================================================================

def get_trace_id(request: Request) -> str:
    """Extract or generate trace ID from request and bind it to the log context."""
    trace_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    set_trace_id(trace_id)
    return trace_id


def get_auth_header(request: Request) -> Optional[str]:
    return request.headers.get("authorization")


def get_role(request: Request) -> str:
    return request.headers.get("x-user-role", "ANON").upper().strip()


def get_user_id(request: Request) -> Optional[str]:
    return request.headers.get("x-user-id")


def standard_response(
    message: str,
    data: Optional[Dict[str, Any]] = None,
    proofs: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build standard response format."""
    return {
        "message": message,
        "data": data or {},
        "proofs": proofs or {"trace_id": trace_id}
    }


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/rank", response_model=RecommendationResponse)
async def rank_sessions(body: RankRequest, request: Request):
    """
    Rank sessions supplied in the request body.

    Sessions are assumed already filtered to future, open ones and history
    to the patient's completed appointments. Returns at most `limit`
    sessions; an empty list for no sessions or a non-positive limit.
    """
    trace_id = get_trace_id(request)

    ranked = get_recommender().rank_sessions(body.sessions, body.history, body.limit)

    result = RecommendationResult(
        recommended=to_ranked_sessions(ranked),
        total_candidates=len(body.sessions),
        history_count=len(body.history),
        limit=body.limit
    )

    return standard_response(
        message=f"Ranked {len(ranked)} of {len(body.sessions)} sessions",
        data=result.model_dump(mode="json"),
        proofs={"trace_id": trace_id, "algorithm": ALGORITHM_NAME, "status": "success"},
        trace_id=trace_id
    )


@router.post("/score", response_model=AgentResponse)
async def score_session(body: ScoreRequest, request: Request):
    """Score a single session and return its feature vector."""
    trace_id = get_trace_id(request)
    recommender = get_recommender()

    score = recommender.score_session(body.session, body.history)
    features = recommender.features(body.session)

    result = SessionScore(
        session_id=body.session.id,
        score=score,
        features=dict(zip(FEATURE_NAMES, features))
    )

    return standard_response(
        message=f"Session {body.session.id} scored {score:.3f}",
        data=result.model_dump(),
        proofs={"trace_id": trace_id, "algorithm": ALGORITHM_NAME, "status": "success"},
        trace_id=trace_id
    )


@router.get("/patients/{patient_id}", response_model=RecommendationResponse)
async def recommend_for_patient(
    patient_id: str,
    request: Request,
    limit: Optional[int] = Query(None, description="Number of recommendations (default 3)"),
    date_from: Optional[str] = Query(None, description="First candidate date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="Last candidate date (YYYY-MM-DD)")
):
    """
    Personalized recommendations for a patient.

    **Requires authentication**. Patients may only request their own
    recommendations; admins may request any patient's.
    """
    trace_id = get_trace_id(request)

    context = {
        "trace_id": trace_id,
        "auth_header": get_auth_header(request),
        "user_role": get_role(request),
        "user_id": get_user_id(request),
        "entities": {
            "patient_id": patient_id,
            "limit": limit,
            "date_from": date_from,
            "date_to": date_to,
        },
    }

    result = await AppointmentRecommendationAgent().execute(context)

    proofs = result.get("proofs") or {}
    if proofs.get("status") == "failed":
        data = result.get("data") or {}
        status_code = data.get("status_code", 500)
        raise to_http_exception(AppError(
            message=result["message"],
            code=data.get("error_type", "internal_error"),
            status_code=status_code
        ))

    return result
