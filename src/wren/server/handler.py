"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts the scope
to a ``Request``, dispatches it, and sends the ``Response`` back through
``send()``. Lifespan events are acknowledged so the dispatcher runs
under any ASGI server; other scope types are ignored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren._internal.asgi import Receive, Scope, Send
from wren.http.request import Request
from wren.server.sender import send_response

if TYPE_CHECKING:
    from wren.dispatcher import Dispatcher

logger = logging.getLogger("wren.server")


async def handle_asgi(dispatcher: Dispatcher, scope: Scope, receive: Receive, send: Send) -> None:
    """Process a single ASGI connection scope."""
    if scope["type"] == "lifespan":
        await _handle_lifespan(receive, send)
        return

    if scope["type"] != "http":
        return

    request = Request.from_asgi(
        dict(scope),
        receive,
        default_method=dispatcher.config.default_method,
    )
    response = await dispatcher.handle(request)
    await send_response(response, send, head=request.method == "HEAD")


async def _handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge startup and shutdown; route tables are already built."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            logger.debug("lifespan startup")
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            logger.debug("lifespan shutdown")
            await send({"type": "lifespan.shutdown.complete"})
            return
