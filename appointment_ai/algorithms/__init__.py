"""
Algorithms Package

Provides the deterministic appointment recommendation engine:
- popularity: Static popularity tables with lookup-with-fallback
- features: Calendar helpers and 6-dimensional session feature vectors
- similarity: Cosine similarity between feature vectors
- appointment_recommender: Session scoring and diversified ranking

All algorithms use deterministic calculations (no randomness) and never modify their inputs.
"""

from appointment_ai.algorithms.popularity import PopularityTables
from appointment_ai.algorithms.features import extract_features
from appointment_ai.algorithms.similarity import cosine_similarity
from appointment_ai.algorithms.appointment_recommender import (
    AppointmentRecommender,
    ScoredSession,
    get_recommender,
    recommend_sessions,
)

__all__ = [
    "PopularityTables",
    "extract_features",
    "cosine_similarity",
    "AppointmentRecommender",
    "ScoredSession",
    "get_recommender",
    "recommend_sessions",
]
