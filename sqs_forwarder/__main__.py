# Copyright 2025 Loopper-AI
# Process entry point: load settings once, then run the poll-forward cycle

from __future__ import annotations

import argparse
import logging
import sys

from .clients import HttpClient
from .config import Settings
from .forwarder import Forwarder
from .services import SQSService

logger = logging.getLogger("sqs_forwarder")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sqs-forwarder", description="Forward SQS messages to an HTTP endpoint.")
    parser.add_argument("--config", help="JSON settings file (default: appsettings.json)")
    parser.add_argument("--once", action="store_true", help="run a single poll/delay cycle and exit")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    logger.info("Loading configuration")
    try:
        settings = Settings.load(args.config)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        raise
    logging.getLogger().setLevel(getattr(logging, settings.log_level, logging.INFO))
    logger.info("Loaded: app_name=%s queue=%s target=%s", settings.app_name, settings.sqs_queue_url, settings.http_url)

    forwarder = Forwarder(settings, SQSService.from_settings(settings), HttpClient())
    try:
        forwarder.run(max_cycles=1 if args.once else None)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
    except Exception as e:
        logger.error("Fatal error, stopping: %s", e)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
