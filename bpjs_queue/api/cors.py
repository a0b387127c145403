"""CORS header set and JSON response helper shared by API routers."""

from typing import Any, Final

from fastapi import Response
from fastapi.responses import JSONResponse

CORS_HEADERS: Final[dict[str, str]] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type, x-cons-id, x-timestamp, x-signature, user_key"
    ),
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def api_json_response(content: dict[str, Any], status_code: int) -> JSONResponse:
    """Build a JSON response carrying the CORS header set.

    Args:
        content: JSON-compatible body.
        status_code: HTTP status code.

    Returns:
        JSONResponse: Response with `application/json` content type and CORS headers.
    """

    return JSONResponse(content=content, status_code=status_code, headers=dict(CORS_HEADERS))


def api_preflight_response() -> Response:
    """Return the empty 204 preflight response with CORS headers only."""

    return Response(status_code=204, headers=dict(CORS_HEADERS))
