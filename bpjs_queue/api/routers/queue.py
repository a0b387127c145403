"""Queue lookup router: `POST /` with `{date}` plus CORS preflight."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from bpjs_queue.service import QueueLookupPort

from ..cors import api_json_response, api_preflight_response


def api_create_queue_router(queue_service: QueueLookupPort) -> APIRouter:
    """Create queue router exposing the adapter's HTTP surface.

    Args:
        queue_service: Service-layer queue lookup port.

    Returns:
        APIRouter: Router exposing `POST /` and `OPTIONS` routes.

    Raises:
        ValueError: Raised when queue_service is invalid.
    """

    if queue_service is None:
        raise ValueError("queue_service must not be None")

    router = APIRouter(tags=["queue"])

    @router.options("/")
    @router.options("/{path:path}")
    def api_queue_preflight(path: str = "") -> Response:
        """Answer CORS preflight for any path.

        Returns:
            Response: Empty 204 response with CORS headers.
        """

        _ = path
        return api_preflight_response()

    @router.post("/")
    async def api_queue_lookup(request: Request) -> JSONResponse:
        """Return the clinic queue for the requested date.

        The body is read raw so malformed JSON maps to a 400 error body
        instead of a framework validation error. The lookup itself blocks on
        the upstream call and runs in the threadpool.

        Args:
            request: Inbound request with JSON body `{date: "YYYY-MM-DD"}`.

        Returns:
            JSONResponse: Adapter result, or `{error}` with status 400/500.
        """

        raw_body = await request.body()
        lookup_response = await run_in_threadpool(queue_service.service_handle_request, raw_body)
        return api_json_response(content=lookup_response.body, status_code=lookup_response.status_code)

    return router
