from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from nicegui import app, ui

from springops.logging_conf import configure_logging
from springops.settings import Settings, settings_from_env
from springops.ui.pages import register_pages

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    parser = argparse.ArgumentParser(description="Spring manufacturing operations dashboard")
    parser.add_argument("--host", type=str, default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--api-url", type=str, default=None, help="Backend REST base URL (default: $SPRINGOPS_API_URL)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: $SPRINGOPS_LOG_LEVEL or INFO)")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return settings_from_env(host=args.host, port=args.port, api_base_url=args.api_url, log_level=args.log_level)


def _drop_client_resets(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    # Browsers closing a websocket on Windows surface as WinError 10054.
    exc = context.get("exception")
    if isinstance(exc, ConnectionResetError) and getattr(exc, "winerror", None) == 10054:
        return
    loop.default_exception_handler(context)


async def _install_reset_filter() -> None:
    asyncio.get_running_loop().set_exception_handler(_drop_client_resets)


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings.log_level)
    logger.info("Starting %s against %s", settings.title, settings.api_base_url)

    register_pages(settings)

    if sys.platform == "win32":
        app.on_startup(_install_reset_filter)
    app.on_shutdown(lambda: logger.info("%s stopped", settings.title))

    ui.run(
        host=settings.host,
        port=settings.port,
        title=settings.title,
        storage_secret=settings.storage_secret,
        reload=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
