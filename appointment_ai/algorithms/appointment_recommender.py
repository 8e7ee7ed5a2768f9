"""
Appointment Recommendation Algorithm

Deterministic, hand-weighted scoring of bookable doctor sessions with a light
similarity component over the patient's completed sessions, followed by a
greedy diversified top-N selection.

No trained model and no randomness. Identical inputs always give identical
output, and inputs are never modified.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from appointment_ai.algorithms.features import (
    FeatureVector,
    availability_ratio,
    extract_features,
    parse_hour,
    parse_session_date,
    resolved_hour,
    weekday_name,
    weekday_of,
)
from appointment_ai.algorithms.popularity import PopularityTables
from appointment_ai.algorithms.similarity import cosine_similarity
from appointment_ai.constants.popularity import (
    DEFAULT_RECOMMENDATION_LIMIT,
    DIVERSITY_RATIO,
    FALLBACK_HOUR,
    RECENCY_DECAY,
)
from appointment_ai.schemas.session import DoctorSession

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration
# ============================================================================

# Availability can at most halve the score
AVAILABILITY_FLOOR = 0.5

# Similarity to the most recent completed session
RECENCY_FLOOR = 0.7

# Blend of content score and average historical similarity
CONTENT_WEIGHT = 0.6
SIMILARITY_WEIGHT = 0.4

# Circular distance to the preferred hour
HOUR_MATCH_FLOOR = 0.8
HOUR_DISTANCE_SCALE = 12.0
HOURS_PER_DAY = 24


# ============================================================================
# Types
# ============================================================================

@dataclass(frozen=True)
class ScoredSession:
    """A session paired with its relevance score for one ranking call."""
    session: DoctorSession
    score: float
    index: int  # position in the caller's list


@dataclass(frozen=True)
class HistoryProfile:
    """Per-call summary of a patient's completed sessions."""
    vectors: Tuple[FeatureVector, ...]
    most_recent: FeatureVector
    preferred_hour: float


# ============================================================================
# Helpers
# ============================================================================

def sigmoid(x: float) -> float:
    """Logistic function 1 / (1 + e^-x)."""
    return 1.0 / (1.0 + math.exp(-x))


def circular_hour_distance(hour: float, other: float) -> float:
    """
    Distance between two hours on a 24h clock.

    Example:
        >>> circular_hour_distance(23, 1)
        2
    """
    delta = hour - other
    return min(abs(delta), abs(delta + HOURS_PER_DAY), abs(delta - HOURS_PER_DAY))


def _date_key(session: DoctorSession) -> date:
    # Unparseable dates sort as the oldest
    return parse_session_date(session.date) or date.min


def historical_hour_preference(history: Sequence[DoctorSession]) -> float:
    """
    Recency-weighted mean start hour of past sessions.

    History is ordered oldest first and entry i is weighted exp(i / 10), so
    recent sessions dominate. Noon when history is empty.
    """
    if not history:
        return float(FALLBACK_HOUR)

    ordered = sorted(history, key=_date_key)

    weighted_sum = 0.0
    total_weight = 0.0
    for i, session in enumerate(ordered):
        weight = math.exp(i / RECENCY_DECAY)
        weighted_sum += resolved_hour(parse_hour(session.start_time)) * weight
        total_weight += weight

    return weighted_sum / total_weight


def most_recent_session(history: Sequence[DoctorSession]) -> Optional[DoctorSession]:
    """Newest session by date; the earliest listed wins a tie."""
    if not history:
        return None
    # sorted() with reverse=True keeps the original order of equal keys
    return sorted(history, key=_date_key, reverse=True)[0]


def diversify(ranked: Sequence[ScoredSession], limit: int) -> List[ScoredSession]:
    """
    Greedy top-N selection that favours new specialties and timeslots.

    Args:
        ranked: Scored sessions sorted by descending score
        limit: Maximum number of results

    Returns:
        Selected sessions in final order

    Strategy:
    1. Seed with the highest scored session
    2. While fewer than 75% of limit are selected, take only candidates with
       an unseen (or absent) specialty and an unseen date/start-time key
    3. Above that threshold, take candidates strictly by score
    4. Backfill skipped candidates by score if still short of
       min(limit, len(ranked))
    """
    if limit <= 0 or not ranked:
        return []

    target = min(limit, len(ranked))
    threshold = limit * DIVERSITY_RATIO

    top = ranked[0]
    selected = [top]
    seen_specialties = {top.session.specialty} if top.session.specialty else set()
    seen_timeslots = {top.session.timeslot_key}

    for candidate in ranked[1:]:
        if len(selected) >= limit:
            break

        if len(selected) < threshold:
            specialty = candidate.session.specialty
            timeslot = candidate.session.timeslot_key
            if (not specialty or specialty not in seen_specialties) and timeslot not in seen_timeslots:
                selected.append(candidate)
                if specialty:
                    seen_specialties.add(specialty)
                seen_timeslots.add(timeslot)
        else:
            selected.append(candidate)

    if len(selected) < target:
        chosen = {item.index for item in selected}
        for candidate in ranked:
            if len(selected) >= target:
                break
            if candidate.index not in chosen:
                selected.append(candidate)
                chosen.add(candidate.index)

    return selected


# ============================================================================
# Recommender
# ============================================================================

class AppointmentRecommender:
    """
    Stateless session scorer and ranker.

    Holds only its popularity tables; safe to share between requests and
    threads. Scoring a session reads no other candidate, so score_sessions()
    may be parallelized by callers; diversify() must run after all scores
    are known.
    """

    def __init__(self, tables: Optional[PopularityTables] = None):
        self.tables = tables or PopularityTables()

    def features(self, session: DoctorSession) -> FeatureVector:
        return extract_features(session, self.tables)

    def profile_history(self, history: Optional[Sequence[DoctorSession]]) -> Optional[HistoryProfile]:
        """Precompute history vectors and hour preference, None for empty history."""
        if not history:
            return None

        return HistoryProfile(
            vectors=tuple(self.features(past) for past in history),
            most_recent=self.features(most_recent_session(history)),
            preferred_hour=historical_hour_preference(history),
        )

    def score_session(
        self,
        session: DoctorSession,
        history: Optional[Sequence[DoctorSession]] = None
    ) -> float:
        """
        Relevance score of one session in (0, 1).

        Args:
            session: Candidate session
            history: Patient's completed sessions (may be empty)

        Returns:
            Sigmoid-squashed composite score
        """
        return self._score(session, self.profile_history(history))

    def _score(self, session: DoctorSession, profile: Optional[HistoryProfile]) -> float:
        tables = self.tables
        hour = parse_hour(session.start_time)
        day_name = weekday_name(weekday_of(session.date))

        # 1-3. Popularity and time-of-day preference
        score = tables.hour_popularity(hour)
        score *= tables.day_score_factor(day_name)
        score *= tables.time_preference(hour)

        # 4. Availability
        score *= AVAILABILITY_FLOOR + (1 - AVAILABILITY_FLOOR) * availability_ratio(session)

        # 5. Specialty popularity
        if session.specialty:
            score *= tables.specialty_popularity(session.specialty)

        # 6. History
        if profile is not None:
            vector = self.features(session)

            recency_score = cosine_similarity(vector, profile.most_recent)
            score *= RECENCY_FLOOR + (1 - RECENCY_FLOOR) * recency_score

            total_similarity = sum(cosine_similarity(vector, past) for past in profile.vectors)
            avg_similarity = total_similarity / len(profile.vectors)
            score = CONTENT_WEIGHT * score + SIMILARITY_WEIGHT * avg_similarity

            distance = circular_hour_distance(resolved_hour(hour), profile.preferred_hour)
            hour_similarity = max(0.0, 1 - distance / HOUR_DISTANCE_SCALE)
            score *= HOUR_MATCH_FLOOR + (1 - HOUR_MATCH_FLOOR) * hour_similarity

        # 7. Squash
        return sigmoid(2 * score - 1)

    def score_sessions(
        self,
        sessions: Sequence[DoctorSession],
        history: Optional[Sequence[DoctorSession]] = None
    ) -> List[ScoredSession]:
        """Score every session independently, in input order."""
        profile = self.profile_history(history)
        return [
            ScoredSession(session=session, score=self._score(session, profile), index=i)
            for i, session in enumerate(sessions)
        ]

    def rank_sessions(
        self,
        sessions: Sequence[DoctorSession],
        history: Optional[Sequence[DoctorSession]] = None,
        limit: int = DEFAULT_RECOMMENDATION_LIMIT
    ) -> List[ScoredSession]:
        """
        Score, sort and diversify sessions.

        Returns:
            At most limit scored sessions in recommendation order
        """
        if not sessions or limit <= 0:
            return []

        scored = self.score_sessions(sessions, history)
        ranked = sorted(scored, key=lambda item: item.score, reverse=True)
        selected = diversify(ranked, limit)

        logger.debug(
            f"Ranked {len(sessions)} sessions against {len(history or [])} history entries, "
            f"selected {len(selected)} (limit={limit})"
        )
        return selected

    def recommend_sessions(
        self,
        sessions: Sequence[DoctorSession],
        history: Optional[Sequence[DoctorSession]] = None,
        limit: int = DEFAULT_RECOMMENDATION_LIMIT
    ) -> List[DoctorSession]:
        """Recommended sessions, best first, length min(limit, len(sessions))."""
        return [item.session for item in self.rank_sessions(sessions, history, limit)]


# ============================================================================
# Default Instance
# ============================================================================

_recommender: Optional[AppointmentRecommender] = None


def get_recommender() -> AppointmentRecommender:
    """Get the shared recommender built from the default tables."""
    global _recommender

    if _recommender is None:
        _recommender = AppointmentRecommender()

    return _recommender


def recommend_sessions(
    sessions: Sequence[DoctorSession],
    history: Optional[Sequence[DoctorSession]] = None,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT
) -> List[DoctorSession]:
    """Recommend sessions with the default recommender."""
    return get_recommender().recommend_sessions(sessions, history, limit)
