"""
Process entry point.

    python -m todo_server --port 8000

The database is opened before the HTTP server starts; if that fails the
process exits non-zero without listening.
"""
import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from .errors import DatabaseConnectionError
from .main import create_app
from .settings import get_settings

logger = logging.getLogger("todo_server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo-server", description="Todo list HTTP server")
    parser.add_argument("--port", type=int, default="8000", help="http server port")
    parser.add_argument("--host", default="0.0.0.0", help="interface to listen on")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = create_app(settings=settings)
    except DatabaseConnectionError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("listening on %s:%d", args.host, args.port)
    try:
        uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    except (OSError, SystemExit) as exc:
        logger.critical("failed to create http server: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
