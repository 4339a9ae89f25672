"""
OpenClaw entry point.

This file handles startup concerns (arg-parsing, logging) and launches the appropriate interface:
the HTTP API, the terminal client (with the API in a background thread), or the Telegram poller on
its own.
"""

import argparse
import logging
import sys

from openclaw.config import settings

logger = logging.getLogger(__name__)

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")
_SECRETS = {
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_ACCESS_TOKEN",
    "NOTION_API_KEY",
    "TELEGRAM_BOT_TOKEN",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _init_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        stream=sys.stdout,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _run_telegram() -> None:
    # pylint: disable=import-outside-toplevel
    from openclaw.agent.runtime import AgentRuntime
    from openclaw.integrations.telegram import TelegramPoller

    if not settings.TELEGRAM_BOT_TOKEN:
        logger.error("TELEGRAM_BOT_TOKEN is not set")
        sys.exit(1)

    runtime = AgentRuntime.from_settings(settings)
    poller = TelegramPoller(runtime)
    poller.start(settings.TELEGRAM_BOT_TOKEN)
    try:
        while poller.running:
            poller.wait(1.0)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping Telegram poller")
    finally:
        poller.stop()
        runtime.close()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the OpenClaw application.

    This function sets up the command-line interface, initializes logging, and starts the
    application in API, CLI or Telegram mode.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(description="Run the OpenClaw agent backend")
    parser.add_argument(
        "--mode",
        choices=["api", "cli", "telegram"],
        type=str.lower,
        default="api",
        help="Launch the REST API, the terminal client, or the Telegram poller (default: api)",
    )
    parser.add_argument(
        "--provider",
        choices=["openai", "anthropic"],
        type=str.lower,
        default=settings.PROVIDER,
        help="Model provider (default from env: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        type=str.lower,
        default=settings.LOG_LEVEL,
        help="Logging level (default from env: %(default)s)",
    )
    args = parser.parse_args(argv)

    # Command-line arguments override env settings
    settings.LOG_LEVEL = args.log_level
    settings.PROVIDER = args.provider

    _init_logging(settings.LOG_LEVEL)

    logger.info("Starting OpenClaw [%s mode, %s provider]", args.mode, settings.PROVIDER)
    logger.debug("Settings: %s", settings.model_dump(exclude=_SECRETS))

    # pylint: disable=import-outside-toplevel
    if args.mode == "telegram":
        _run_telegram()
        return

    from openclaw.api.app import run_api

    if args.mode == "api":
        run_api(host="0.0.0.0", port=settings.API_PORT, reload=settings.DEBUG)
        return

    import threading

    from openclaw.client.cli import run_cli

    # Start API server in a separate thread; reload doesn't work with threading
    api_thread = threading.Thread(
        target=run_api,
        kwargs={"host": "0.0.0.0", "port": settings.API_PORT, "reload": False, "log_level": "warning"},
        daemon=True,
    )
    api_thread.start()
    run_cli()


if __name__ == "__main__":
    main()
