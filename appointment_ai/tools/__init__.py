"""
Clients for services this one depends on.

- session_service_client: doctor sessions and appointment history from the
  PostgREST data backend

Client modules hold pooled httpx clients and are imported on demand:
`from appointment_ai.tools import session_service_client`.
"""

import importlib
import logging

logger = logging.getLogger(__name__)

# Modules exposing an async aclose_client()
CLIENT_MODULES = (
    "appointment_ai.tools.session_service_client",
)


async def aclose_all_clients() -> None:
    """Close every pooled client; called from the app lifespan on shutdown."""
    for module_path in CLIENT_MODULES:
        module = importlib.import_module(module_path)
        try:
            await module.aclose_client()
        except Exception as e:
            # Shutdown continues with the remaining clients
            logger.error(f"Error closing {module_path}: {e}")
