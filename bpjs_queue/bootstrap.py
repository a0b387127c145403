"""Application bootstrap wiring for startup validation and dependency assembly."""

import logging

from fastapi import FastAPI

from bpjs_queue.adapters import BpjsUpstreamClient
from bpjs_queue.api import create_api_application
from bpjs_queue.config import AppSettings, config_load_settings, config_resolve_credentials
from bpjs_queue.domain import ConfigurationError, Credentials
from bpjs_queue.service import QueueLookupService

logger = logging.getLogger(__name__)


def bootstrap_resolve_credentials(settings: AppSettings) -> Credentials | None:
    """Resolve credentials once, logging presence flags but never values.

    Args:
        settings: Validated application settings.

    Returns:
        Credentials | None: Credentials, or None when any is unset.
    """

    logger.info(
        "BPJS credentials check - cons_id set: %s, secret_key set: %s, user_key set: %s",
        settings.bpjs_cons_id is not None,
        settings.bpjs_secret_key is not None,
        settings.bpjs_user_key is not None,
    )
    try:
        return config_resolve_credentials(settings)
    except ConfigurationError as error:
        logger.error("%s; queue requests will be answered with HTTP 500", error)
        return None


def bootstrap_create_queue_service(settings: AppSettings | None = None) -> QueueLookupService:
    """Build the queue lookup service for HTTP and CLI surfaces.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.

    Returns:
        QueueLookupService: Fully wired lookup service.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    upstream_client = BpjsUpstreamClient(
        base_url=resolved_settings.bpjs_base_url,
        request_timeout_seconds=resolved_settings.bpjs_request_timeout_seconds,
    )
    return QueueLookupService(
        credentials=bootstrap_resolve_credentials(resolved_settings),
        upstream_client=upstream_client,
        retry_attempts=resolved_settings.bpjs_retry_attempts,
        retry_backoff_seconds=resolved_settings.bpjs_retry_backoff_seconds,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return create_api_application(
        settings=resolved_settings,
        queue_service=bootstrap_create_queue_service(resolved_settings),
    )
