"""
Agents Package

Agents wrap algorithms with data fetching, access checks and message formatting.

Agents:
- AppointmentRecommendationAgent: Personalized session recommendations for a patient

Every agent returns {message, data, proofs} (see BaseAgent).
"""

from appointment_ai.agents.base_agent import BaseAgent
from appointment_ai.agents.recommendation_agent import AppointmentRecommendationAgent

__all__ = [
    "BaseAgent",
    "AppointmentRecommendationAgent",
]
