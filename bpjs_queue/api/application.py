"""FastAPI application factory for the BPJS queue adapter.

This module defines API application composition used by the runtime.
"""

from fastapi import FastAPI

from bpjs_queue.config import AppSettings
from bpjs_queue.service import QueueLookupPort

from .routers import api_create_health_router, api_create_queue_router


def create_api_application(settings: AppSettings, queue_service: QueueLookupPort) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        queue_service: Queue lookup service handling `POST /`.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when router dependencies are invalid.
    """

    application = FastAPI(title="BPJS Queue Adapter")
    application.include_router(api_create_health_router(settings=settings, queue_service=queue_service))
    application.include_router(api_create_queue_router(queue_service=queue_service))
    return application
