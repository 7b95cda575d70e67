"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or prints one dashboard computation pass as JSON.
"""

import argparse
import json
import logging

import uvicorn

from fund_ledger.api.serializers import api_serialize_dashboard
from fund_ledger.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_dashboard_service,
    bootstrap_create_price_oracle,
)
from fund_ledger.config import config_load_settings


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Crypto fund ledger runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "dashboard-report"),
        help="Runtime command: `api` starts server, `dashboard-report` prints one dashboard pass as JSON",
        type=str,
    )
    argument_parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        type=str,
        help="Root logging level, for example DEBUG or WARNING",
    )
    parsed_arguments = argument_parser.parse_args()
    logging.basicConfig(
        level=parsed_arguments.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = config_load_settings()

    if parsed_arguments.command == "dashboard-report":
        price_oracle = bootstrap_create_price_oracle(settings)
        try:
            result = bootstrap_create_dashboard_service(settings, price_oracle).ledger_dashboard_build()
        except RuntimeError as error:
            logging.getLogger(__name__).error("dashboard report failed: %s", error)
            raise SystemExit(1) from error
        finally:
            price_oracle.adapter_close()
        print(json.dumps(api_serialize_dashboard(result), indent=2))
        return

    application = bootstrap_create_application()
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


if __name__ == "__main__":
    main()
