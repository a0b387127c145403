"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or runs one queue lookup from the command line.
"""

import argparse
import json

import uvicorn

from bpjs_queue.bootstrap import bootstrap_create_application, bootstrap_create_queue_service
from bpjs_queue.config import config_configure_logging, config_load_settings


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when a `fetch` lookup does not return HTTP 200.
    """

    argument_parser = argparse.ArgumentParser(description="BPJS queue adapter runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "fetch"),
        help="Runtime command: `api` starts server, `fetch` runs one queue lookup and prints the JSON result",
        type=str,
    )
    argument_parser.add_argument(
        "--date",
        dest="date",
        type=str,
        help="Queue date in YYYY-MM-DD format for `fetch`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    config_configure_logging(settings.log_level)

    if parsed_arguments.command == "fetch":
        queue_service = bootstrap_create_queue_service(settings)
        lookup_response = queue_service.service_lookup_queue(parsed_arguments.date)
        print(json.dumps(lookup_response.body, indent=2, ensure_ascii=False))
        if lookup_response.status_code != 200:
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


if __name__ == "__main__":
    main()
