"""FastAPI application entry point and process launcher."""

import argparse
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from pageserver import __version__
from pageserver.config import Settings, _build_settings, settings
from pageserver.resolver import FileResolver
from pageserver.routes import PageRouter, router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    app_settings: Settings = app.state.settings
    if not Path(app_settings.PUBLIC_DIR).is_dir():
        logger.warning(f"Public directory {app_settings.PUBLIC_DIR} does not exist; every lookup will 404")
    logger.info(f"server running at http://{app_settings.HOST}:{app_settings.PORT}")
    yield
    logger.info("server stopped")


async def _empty_error_response(request: Request, exc: StarletteHTTPException) -> Response:
    # Unrouted methods surface as 405 from the router; they are plain 404s here
    status_code = 404 if exc.status_code == 405 else exc.status_code
    return Response(status_code=status_code)


def create_app(
    app_settings: Optional[Settings] = None,
    resolver: Optional[FileResolver] = None,
) -> FastAPI:
    """Build the app around an explicitly constructed router and resolver."""
    app_settings = app_settings or settings
    if resolver is None:
        resolver = FileResolver(app_settings.PUBLIC_DIR, app_settings.STREAM_CHUNK_SIZE)

    app = FastAPI(
        title="pageserver",
        description="Serves a redirect, two fixed pages, and files from a public directory.",
        version=__version__,
        lifespan=lifespan,
        # Every GET path is a file lookup, so the docs routes stay off
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = app_settings
    app.state.page_router = PageRouter(resolver, app_settings)
    app.add_exception_handler(StarletteHTTPException, _empty_error_response)
    app.include_router(router)
    return app


app = create_app()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the public directory over HTTP.")
    parser.add_argument("--host", help=f"Bind address (default {settings.HOST})")
    parser.add_argument("--port", type=int, help=f"Port to listen on (default {settings.PORT})")
    parser.add_argument("--public-dir", help="Directory to serve files from")
    parser.add_argument("--log-level", help=f"Logging level (default {settings.LOG_LEVEL})")
    return parser


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.host:
        overrides["HOST"] = args.host
    if args.port is not None:
        overrides["PORT"] = args.port
    if args.public_dir:
        overrides["PUBLIC_DIR"] = os.path.abspath(args.public_dir)
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    app_settings = _build_settings(**overrides)

    logging.basicConfig(
        level=app_settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(app_settings),
        host=app_settings.HOST,
        port=app_settings.PORT,
        log_level=app_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
