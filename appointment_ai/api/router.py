"""
Central API Router

Aggregates all endpoint routers for the appointment recommendation service.
"""

import logging
from fastapi import APIRouter

from appointment_ai.api.recommendations import router as recommendations_router

logger = logging.getLogger(__name__)

# Main API router
api_router = APIRouter()

# Router configurations: (router, prefix, tags)
ROUTER_CONFIGS = [
    (recommendations_router, "/recommendations", ["Appointment Recommendations"]),
]

for router, prefix, tags in ROUTER_CONFIGS:
    api_router.include_router(router, prefix=prefix, tags=tags)
    logger.info(f"Registered router at {prefix}")

logger.info(f"API router initialized with {len(api_router.routes)} routes")
