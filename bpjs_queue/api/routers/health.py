"""Health endpoint router for app and credential configuration checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from bpjs_queue.config import AppSettings
from bpjs_queue.service import QueueLookupPort


def api_create_health_router(settings: AppSettings, queue_service: QueueLookupPort) -> APIRouter:
    """Create health-check router reporting credential configuration state.

    Args:
        settings: Validated settings used for environment metadata.
        queue_service: Queue service whose credential state is reported.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if queue_service is None:
        raise ValueError("queue_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health and whether BPJS credentials are configured.

        The upstream is not contacted; a probe must not spend a signed request.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.
        """

        payload = {
            "status": "ok",
            "app": "up",
            "credentials": "configured" if queue_service.credentials_configured else "missing",
            "environment": settings.environment_name,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
