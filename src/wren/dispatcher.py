"""The dispatcher — resolves one request to exactly one handler.

Per request::

    Received -> Matched | NotFound
             -> MethodResolved | MethodNotAllowed
             -> Responded | Failed

Page routes are always tried before api routes. Within a band the
first matcher (in specificity order) that accepts the path wins.
Every per-request failure is converted to a terminal response here;
nothing propagates to the transport.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.config import DispatcherConfig
from wren.context import RequestContext, context_var
from wren.errors import (
    ConfigurationError,
    HandlerFailure,
    HTTPError,
    MethodNotSupported,
    RouteNotFound,
    UnterminatedResponse,
)
from wren.http.request import Request
from wren.http.response import Response
from wren.providers import HandlerSet
from wren.routing.methods import parse_method
from wren.routing.table import RouteKind, RouteMatch, RouteTable
from wren.server.errors import handle_http_error, handle_internal_error

if TYPE_CHECKING:
    from wren.pages.types import PageRenderer

logger = logging.getLogger("wren.server")

RouteSource = Mapping[str, Any] | RouteTable


def _as_table(routes: RouteSource | None, kind: RouteKind) -> RouteTable:
    if routes is None:
        return RouteTable(kind=kind)
    if isinstance(routes, RouteTable):
        if routes.kind is not kind:
            msg = f"Expected a {kind.value} route table, got a {routes.kind.value} one"
            raise ConfigurationError(msg)
        return routes
    return RouteTable.build(routes, kind)


class Dispatcher:
    """Route requests to api handlers or rendered pages.

    Both tables are built (compiled and sorted) once, here. The
    dispatcher holds no other state, so one instance can serve any
    number of concurrent requests.

    Args:
        api_routes: ``{pattern: provider}`` for api routes, or a built
            ``RouteTable``. A provider resolves to a module (or mapping,
            or ``HandlerSet``) exporting ``get``, ``post``, ... ``all``.
        page_routes: ``{pattern: provider}`` for page routes. Requires
            *page_renderer*.
        page_renderer: Renders resolved page modules to HTML.
        config: Dispatcher configuration.

    Raises:
        MalformedPattern: if any pattern fails to compile.
        ConfigurationError: if page routes are given without a renderer.

    Usage::

        dispatcher = Dispatcher({"/users/$id": load_users})
        response = await dispatcher.handle(Request.build("/users/42"))

    The dispatcher is also an ASGI application.
    """

    __slots__ = ("_api", "_pages", "config", "page_renderer")

    def __init__(
        self,
        api_routes: RouteSource | None = None,
        page_routes: RouteSource | None = None,
        *,
        page_renderer: PageRenderer | None = None,
        config: DispatcherConfig | None = None,
    ) -> None:
        self.config = config or DispatcherConfig()
        self.page_renderer = page_renderer
        self._api = _as_table(api_routes, RouteKind.API)
        self._pages = _as_table(page_routes, RouteKind.PAGE)

        if self._pages and page_renderer is None:
            msg = "Page routes were given but no page_renderer to render them"
            raise ConfigurationError(msg)

    @classmethod
    def from_directory(
        cls,
        routes_dir: str | Path,
        *,
        page_renderer: PageRenderer | None = None,
        config: DispatcherConfig | None = None,
    ) -> Dispatcher:
        """Build a dispatcher from the route files under *routes_dir*.

        See :func:`wren.discovery.discover_routes` for the file layout.
        When page files are found and no *page_renderer* is given, a
        ``DocumentRenderer`` built from the config's document settings
        is used.
        """
        from wren.discovery import discover_routes

        config = config or DispatcherConfig()
        found = discover_routes(routes_dir, config)
        if found.pages and page_renderer is None:
            from wren.pages.renderer import DocumentRenderer

            page_renderer = DocumentRenderer(title=config.document_title, lang=config.document_lang)
        return cls(
            found.api,
            found.pages or None,
            page_renderer=page_renderer,
            config=config,
        )

    # -- Tables --

    @property
    def api_table(self) -> RouteTable:
        return self._api

    @property
    def page_table(self) -> RouteTable:
        return self._pages

    @property
    def tables(self) -> tuple[RouteTable, ...]:
        """Tables in priority order: pages, then apis."""
        return (self._pages, self._api)

    def match(self, path: str) -> RouteMatch | None:
        """Find the route for *path*, scanning pages before apis."""
        for table in self.tables:
            found = table.find(path)
            if found is not None:
                return found
        return None

    # -- Request handling --

    async def handle(self, request: Request) -> Response:
        """Dispatch *request* and return its terminal response.

        Never raises for per-request failures: 404, 405 and 500 are all
        returned as responses.
        """
        try:
            return await self._dispatch(request)
        except HTTPError as exc:
            return handle_http_error(exc, request, self.config)
        except Exception as exc:
            return handle_internal_error(exc, request, self.config)

    async def _dispatch(self, request: Request) -> Response:
        match = self.match(request.path)
        if match is None:
            raise RouteNotFound(f"No route matches {request.method} {request.path!r}")

        logger.debug(
            "%s %s -> %s route %s", request.method, request.path, match.entry.kind.value, match.entry.pattern
        )
        ctx = RequestContext(request=request, params=match.params)
        if match.entry.kind is RouteKind.PAGE:
            return await self._render_page(match, ctx)
        return await self._call_handler(match, ctx)

    async def _render_page(self, match: RouteMatch, ctx: RequestContext) -> Response:
        renderer = self.page_renderer
        if renderer is None:
            msg = "No page renderer configured"
            raise ConfigurationError(msg)

        token = context_var.set(ctx)
        try:
            page = await match.entry.provider.resolve()
            html = await renderer.render(page, ctx)
        except Exception as exc:
            raise HandlerFailure() from exc
        finally:
            context_var.reset(token)

        return Response(
            body=html.encode("utf-8"),
            status=200,
            headers=(("Content-Type", self.config.page_content_type),),
        )

    async def _call_handler(self, match: RouteMatch, ctx: RequestContext) -> Response:
        try:
            handlers = HandlerSet.from_module(await match.entry.provider.resolve())
        except Exception as exc:
            raise HandlerFailure() from exc

        method = parse_method(ctx.request.method, self.config.default_method)
        handler = handlers.select(method)
        if handler is None:
            raise MethodNotSupported(handlers.allowed)

        token = context_var.set(ctx)
        try:
            await invoke(handler, ctx)
        except Exception as exc:
            raise HandlerFailure() from exc
        finally:
            context_var.reset(token)

        if not ctx.response.ended:
            raise UnterminatedResponse(ctx.request.method, ctx.request.path)

        return ctx.response.to_response()

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3 entry point."""
        from wren.server.handler import handle_asgi

        await handle_asgi(self, scope, receive, send)
