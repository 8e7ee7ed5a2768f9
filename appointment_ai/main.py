"""
Appointment recommendation service.

    uvicorn appointment_ai.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from appointment_ai.api import api_router, API_VERSION
from appointment_ai.core.config import settings
from appointment_ai.core.logging import setup_logging
from appointment_ai.tools import aclose_all_clients

setup_logging()

logger = logging.getLogger(__name__)

SERVICE_NAME = "Appointment Recommendation Service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Closes pooled data service connections on shutdown."""
    logger.info(f"{SERVICE_NAME} starting ({settings.APP_ENV})")
    yield
    await aclose_all_clients()
    logger.info(f"{SERVICE_NAME} stopped")


app = FastAPI(
    title=SERVICE_NAME,
    description="Ranks bookable doctor sessions for patients",
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "status": "running",
        "version": API_VERSION,
    }


@app.get("/health")
async def health():
    """Liveness only; the data service is not probed."""
    return {
        "status": "healthy",
        "service": "appointment_ai",
        "components": {"api": "ok", "recommender": "ok"},
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
