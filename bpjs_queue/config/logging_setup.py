"""Process-wide logging configuration for runtime entrypoints."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def config_configure_logging(log_level: str = "INFO") -> None:
    """Configure root logging once for CLI and server runtimes.

    Args:
        log_level: Logging level name, for example `INFO` or `DEBUG`.

    Returns:
        None: Configures the root logger as a side effect.
    """

    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)
    # httpx logs every request line at INFO, including the request URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)
