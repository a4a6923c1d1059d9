"""Page routing: redirect, fixed pages, generic file lookup, and error mapping.

Every request lands on a single catch-all endpoint. ``PageRouter.dispatch``
decides the route outcome, ``render`` turns it into a response, and any
failure along the way is handled exactly once by ``handle_error``:

  - GET /            → 302 to the configured home location
  - GET /home        → home page bytes
  - GET /controller  → controller page bytes
  - GET /<path>      → file bytes, Content-Type only when the extension is known
  - anything else    → 404
"""

import errno
import logging

from fastapi import APIRouter, Depends, Request
from starlette.responses import RedirectResponse, Response, StreamingResponse

from pageserver.config import Settings
from pageserver.resolver import FileResolver
from pageserver.schemas import (
    ErrorKind,
    NotFound,
    Redirect,
    RequestDescriptor,
    RouteOutcome,
    Stream,
)

logger = logging.getLogger(__name__)

# Substring that marks a missing-file failure in an error message
NOT_FOUND_MARKER = "ENOENT"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter(tags=["Pages"])


class PageRouter:
    """Maps (method, path) to a route outcome. Holds no per-request state."""

    def __init__(self, resolver: FileResolver, settings: Settings):
        self.resolver = resolver
        self.settings = settings

    async def dispatch(self, method: str, path: str) -> RouteOutcome:
        request = RequestDescriptor(method=method, path=path)
        if request.method != "GET":
            return NotFound()

        if request.path == "/":
            return Redirect(location=self.settings.HOME_LOCATION)

        if request.path == "/home":
            file_stream = await self.resolver.get_file_stream(self.settings.HOME_PAGE)
            return Stream(stream=file_stream.stream)

        if request.path == "/controller":
            file_stream = await self.resolver.get_file_stream(self.settings.CONTROLLER_PAGE)
            return Stream(stream=file_stream.stream)

        file_stream = await self.resolver.get_file_stream(request.path)
        content_type = self.settings.content_type_for(file_stream.type)
        if content_type:
            logger.debug(f"{request.path}: {file_stream.type} -> {content_type}")
        return Stream(stream=file_stream.stream, content_type=content_type)


def classify_error(error: BaseException) -> ErrorKind:
    """Missing-file failures are NOT_FOUND, everything else is SERVER_ERROR."""
    if isinstance(error, FileNotFoundError) or getattr(error, "errno", None) == errno.ENOENT:
        return ErrorKind.NOT_FOUND
    if NOT_FOUND_MARKER in str(error):
        return ErrorKind.NOT_FOUND
    return ErrorKind.SERVER_ERROR


def handle_error(error: BaseException) -> Response:
    kind = classify_error(error)
    if kind is ErrorKind.NOT_FOUND:
        logger.warning(f"asset not found {error}")
    else:
        logger.error(f"caught error on API {error!r}", exc_info=error)
    return Response(status_code=kind.status_code)


def render(outcome: RouteOutcome) -> Response:
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.location, status_code=302)
    if isinstance(outcome, Stream):
        # Passed as a header, not media_type, so no charset is appended
        headers = {"Content-Type": outcome.content_type} if outcome.content_type else None
        return StreamingResponse(outcome.stream, status_code=200, headers=headers)
    return Response(status_code=404)


def get_page_router(request: Request) -> PageRouter:
    """Dependency returning the router the app was built with."""
    return request.app.state.page_router


@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def handler(request: Request, page_router: PageRouter = Depends(get_page_router)) -> Response:
    try:
        outcome = await page_router.dispatch(request.method, request.scope["path"])
        return render(outcome)
    except Exception as error:
        return handle_error(error)
