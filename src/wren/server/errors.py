"""Error handling pipeline for wren requests.

Maps HTTPError exceptions and unexpected failures to terminal
``Response`` objects. Bodies are fixed plain-text strings: the
exception message never reaches the client, only the log.
"""

import logging

from wren.config import DispatcherConfig
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.server")

NOT_FOUND_BODY = "Not found"
METHOD_NOT_ALLOWED_BODY = "Method not allowed"
INTERNAL_ERROR_BODY = "Internal server error"

_STATUS_BODIES: dict[int, str] = {
    404: NOT_FOUND_BODY,
    405: METHOD_NOT_ALLOWED_BODY,
    500: INTERNAL_ERROR_BODY,
}


def handle_http_error(
    exc: HTTPError,
    request: Request,
    config: DispatcherConfig,
) -> Response:
    """Map an HTTPError to its terminal Response.

    5xx errors are logged with their traceback (and chained cause);
    4xx errors are logged at debug level only.
    """
    if exc.status >= 500:
        logger.error("%d %s %s", exc.status, request.method, request.path, exc_info=exc)
        body = INTERNAL_ERROR_BODY
    else:
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        body = _STATUS_BODIES.get(exc.status) or exc.detail or f"Error {exc.status}"

    resp = Response.plain(body, exc.status, content_type=config.error_content_type)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(
    exc: Exception,
    request: Request,
    config: DispatcherConfig,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path, exc_info=exc)
    return Response.plain(INTERNAL_ERROR_BODY, 500, content_type=config.error_content_type)
