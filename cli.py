# cli.py
import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path

import uvicorn

from config import Settings, load_settings
from errors import StorageError, StorageInitError
from logging_setup import setup_logging
from storage import JsonFileStore

logger = logging.getLogger(__name__)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Returns settings with any values given on the command line replacing the environment ones."""
    overrides = {}
    if getattr(args, "data_dir", None):
        overrides["data_dir"] = Path(args.data_dir)
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port
    return dataclasses.replace(settings, **overrides)


def cmd_init(settings: Settings) -> int:
    store = JsonFileStore(settings.tasks_file)
    try:
        asyncio.run(store.initialize())
    except StorageInitError as e:
        logger.error("Failed to initialize task storage: %s", e)
        return 1
    print(f"Task storage ready at {settings.tasks_file}")
    return 0


def cmd_list(settings: Settings) -> int:
    store = JsonFileStore(settings.tasks_file)
    try:
        tasks = asyncio.run(store.load())
    except StorageError as e:
        logger.error("Failed to read tasks: %s", e)
        return 1
    print(json.dumps(tasks, indent=2, ensure_ascii=False))
    return 0


def cmd_serve(settings: Settings) -> int:
    # Imported here so `init` and `list` don't build the web application.
    from main import create_app

    store = JsonFileStore(settings.tasks_file)
    try:
        asyncio.run(store.initialize())
    except StorageInitError as e:
        logger.error("Failed to start server: %s", e)
        return 1

    app = create_app(settings=settings, store=store)
    logger.info("Server running at http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve and inspect the quadrant task list.")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    parser_serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    parser_serve.add_argument("--host", type=str, default=None, help="Host to bind.")
    parser_serve.add_argument("--port", type=int, default=None, help="Port to listen on.")
    parser_serve.add_argument("--data-dir", type=str, default=None, help="Directory holding the tasks file.")

    parser_init = subparsers.add_parser("init", help="Create the tasks file if missing and verify it.")
    parser_init.add_argument("--data-dir", type=str, default=None, help="Directory holding the tasks file.")

    parser_list = subparsers.add_parser("list", help="Print every stored task as JSON.")
    parser_list.add_argument("--data-dir", type=str, default=None, help="Directory holding the tasks file.")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(load_settings(), args)
    setup_logging(settings.log_level)

    if args.command == "serve":
        return cmd_serve(settings)
    elif args.command == "init":
        return cmd_init(settings)
    elif args.command == "list":
        return cmd_list(settings)
    return 2


if __name__ == "__main__":
    sys.exit(main())
