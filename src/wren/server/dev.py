"""Dev server: serves a live Dispatcher through pounce.

pounce is an optional dependency (``pip install wren[server]``) and is
imported only when a server is actually started.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.dispatcher import Dispatcher

logger = logging.getLogger("wren.server")


def run_dev_server(
    dispatcher: Dispatcher,
    host: str,
    port: int,
    *,
    reload: bool = True,
    reload_dirs: tuple[str, ...] = (),
    app_path: str | None = None,
) -> None:
    """Serve *dispatcher* on *host*:*port* until interrupted.

    pounce's own ``run()`` wants an import string; the dispatcher here is
    already built, so a ``pounce.server.Server`` is driven directly.

    Args:
        dispatcher: The ASGI app to serve.
        host: Bind host address.
        port: Bind port number.
        reload: Restart on source changes.
        reload_dirs: Extra directories to watch, such as a routes
            directory outside the working directory.
        app_path: ``"module:attribute"`` to re-import on reload, so edits
            to route files are picked up. Without it, reload restarts the
            same dispatcher object.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    logger.info(
        "Serving %d page and %d api routes on http://%s:%d",
        len(dispatcher.page_table),
        len(dispatcher.api_table),
        host,
        port,
    )
    server = Server(
        ServerConfig(host=host, port=port, workers=1, reload=reload, reload_dirs=reload_dirs),
        dispatcher,
        app_path=app_path,
    )
    server.run()
