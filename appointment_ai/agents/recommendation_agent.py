"""
Appointment Recommendation Agent

Responsibilities:
- Fetch the patient's completed appointment history
- Fetch open doctor sessions in the booking window
- Rank them with the appointment recommender
- Format a dashboard-ready message

Integrates with:
- session_service_client for sessions and history
- AppointmentRecommender for scoring and diversification
"""

import logging
from typing import Any, Dict, List, Optional

from appointment_ai.agents.base_agent import BaseAgent
from appointment_ai.algorithms.appointment_recommender import (
    AppointmentRecommender,
    ScoredSession,
    get_recommender,
)
from appointment_ai.algorithms.features import weekday_name, weekday_of
from appointment_ai.core.config import settings
from appointment_ai.core.errors import AppError
from appointment_ai.core.security import require_auth, require_patient_access
from appointment_ai.schemas.recommend import RankedSession, RecommendationResult
from appointment_ai.tools import session_service_client

logger = logging.getLogger(__name__)

ALGORITHM_NAME = "hybrid_popularity_similarity_ranking"


class AppointmentRecommendationAgent(BaseAgent):
    """
    Agent that produces personalized session recommendations for a patient.

    Entities:
    - patient_id (required)
    - limit (optional, defaults to RECOMMENDATION_LIMIT)
    - date_from / date_to (optional, default tomorrow .. LOOKAHEAD_DAYS)
    """

    def __init__(self, recommender: Optional[AppointmentRecommender] = None):
        self.recommender = recommender or get_recommender()

    async def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        trace_id = self.get_trace_id(context)
        entities = self.get_entities(context)
        auth_header = self.get_auth_header(context)
        user_role = self.get_user_role(context)

        try:
            require_auth(auth_header)
        except AppError as e:
            return self.error_response(
                message="Authentication required for personalized recommendations.",
                trace_id=trace_id,
                error_type=e.code,
                status_code=e.status_code
            )

        patient_id = entities.get("patient_id")
        if not patient_id:
            return self.validation_error(
                message="I need to know which patient to recommend appointments for.",
                suggestion="Please provide a patient_id.",
                missing_field="patient_id",
                example="patient_id=3f1c2a9e",
                trace_id=trace_id
            )

        try:
            role = require_patient_access(user_role, self.get_user_id(context), patient_id)
        except AppError as e:
            return self.error_response(
                message=e.message,
                trace_id=trace_id,
                error_type=e.code,
                status_code=e.status_code
            )

        limit = self._resolve_limit(entities.get("limit"))
        if limit is None:
            return self.validation_error(
                message="The number of recommendations is invalid.",
                suggestion=f"Please use a limit between 0 and {settings.MAX_RECOMMENDATION_LIMIT}.",
                missing_field="limit",
                example="limit=3",
                trace_id=trace_id
            )

        default_from, default_to = session_service_client.default_window()
        date_from = entities.get("date_from") or default_from
        date_to = entities.get("date_to") or default_to

        try:
            sessions = await session_service_client.get_available_sessions(
                date_from=date_from,
                date_to=date_to,
                auth_header=auth_header,
                request_id=trace_id[:8]
            )
            history = await session_service_client.get_patient_history(
                patient_id=patient_id,
                auth_header=auth_header,
                request_id=trace_id[:8]
            )
        except AppError as e:
            if e.status_code >= 500:
                logger.error(f"[{trace_id[:8]}] Data service unavailable: {e.message}")
                return self._backend_unavailable_response(trace_id, patient_id)
            return self.error_response(
                message=e.message,
                trace_id=trace_id,
                error_type=e.code,
                status_code=e.status_code
            )

        ranked = self.recommender.rank_sessions(sessions, history, limit)
        logger.info(
            f"[{trace_id[:8]}] Recommended {len(ranked)} of {len(sessions)} sessions "
            f"for patient {patient_id} ({len(history)} history entries)"
        )

        result = RecommendationResult(
            recommended=to_ranked_sessions(ranked),
            total_candidates=len(sessions),
            history_count=len(history),
            limit=limit,
            patient_id=str(patient_id)
        )

        return self.success_response(
            message=self._format_recommendations_message(ranked),
            data=result.model_dump(mode="json"),
            trace_id=trace_id,
            user_role=role,
            algorithm=ALGORITHM_NAME,
            sources=[
                {"table": "doctor_sessions", "window": [date_from, date_to]},
                {"table": "appointments", "patient_id": str(patient_id)},
            ]
        )

    def _resolve_limit(self, raw: Any) -> Optional[int]:
        """Requested limit, default when absent, None when invalid."""
        if raw is None or raw == "":
            return settings.RECOMMENDATION_LIMIT
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            return None
        if limit < 0 or limit > settings.MAX_RECOMMENDATION_LIMIT:
            return None
        return limit

    def _format_recommendations_message(self, ranked: List[ScoredSession]) -> str:
        """Format ranked sessions into a user-friendly message."""
        if not ranked:
            return "No open sessions match right now. Please check back later or browse all doctors."

        message = f"I found {len(ranked)} recommended appointment(s) for you:"

        for i, item in enumerate(ranked, 1):
            session = item.session
            day = weekday_name(weekday_of(session.date))
            when = f"{day}, {session.date}" if day else session.date

            message += f"\n\n{i}. {when}"
            if session.start_time:
                message += f" at {session.start_time}"
                if session.end_time:
                    message += f" - {session.end_time}"

            if session.doctor and session.doctor.full_name:
                message += f"\n   Dr. {session.doctor.full_name}"
                if session.specialty:
                    message += f" ({session.specialty})"

            message += f"\n   Match score: {item.score:.2f}"

        return message

    def _backend_unavailable_response(self, trace_id: str, patient_id: str) -> Dict[str, Any]:
        """Return response when the data service is unavailable."""
        return self.error_response(
            message="Recommendation service temporarily unavailable.",
            trace_id=trace_id,
            error_type="service_unavailable",
            status_code=503,
            status="backend_unavailable",
            reason="Session data service is not responding",
            requested_params={"patient_id": patient_id},
            suggested_action="Please try again in a moment, or contact support if the issue persists"
        )


def to_ranked_sessions(ranked: List[ScoredSession]) -> List[RankedSession]:
    """Attach 1-based ranks to scored sessions."""
    return [
        RankedSession(rank=i, score=item.score, session=item.session)
        for i, item in enumerate(ranked, 1)
    ]
