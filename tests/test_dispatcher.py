"""Tests for wren.dispatcher — request resolution and the error contract."""

import asyncio
import logging
from typing import Any

import pytest

from wren.config import DispatcherConfig
from wren.context import RequestContext, get_context
from wren.dispatcher import Dispatcher
from wren.errors import ConfigurationError, MalformedPattern, RouteNotFound
from wren.http.request import Request
from wren.providers import HandlerSet
from wren.routing.methods import HTTPMethod
from wren.routing.table import RouteKind, RouteTable


def _echo_params(ctx: RequestContext) -> None:
    ctx.response.set_header("Content-Type", "application/json")
    ctx.response.end(repr(sorted(ctx.params.items())))


def _routes(**handlers: Any) -> Any:
    """Provider returning a handler mapping."""
    return lambda: handlers


class _StaticPages:
    """Page renderer that returns the page object's ``html`` attribute."""

    async def render(self, page: Any, ctx: RequestContext) -> str:
        return f"<p>{page['html']} {ctx.params}</p>"


class TestMatching:
    async def test_api_route(self) -> None:
        d = Dispatcher({"/posts/$id": _routes(get=_echo_params)})
        response = await d.handle(Request.build("/posts/42"))
        assert response.status == 200
        assert response.text == "[('id', '42')]"
        assert response.header("content-type") == "application/json"

    async def test_literal_beats_capture(self) -> None:
        def new(ctx: RequestContext) -> None:
            ctx.response.end("new")

        d = Dispatcher({"/posts/$id": _routes(get=_echo_params), "/posts/new": _routes(get=new)})
        response = await d.handle(Request.build("/posts/new"))
        assert response.text == "new"

    async def test_query_and_fragment_are_ignored(self) -> None:
        d = Dispatcher({"/posts/$id": _routes(get=_echo_params)})
        response = await d.handle(Request.build("/posts/7?x=1#top"))
        assert response.text == "[('id', '7')]"

    async def test_catch_all_fallback(self) -> None:
        d = Dispatcher({"/about": _routes(get=_echo_params), "/$$all": _routes(get=_echo_params)})
        response = await d.handle(Request.build("/a/b/c"))
        assert response.text == "[('all', 'a/b/c')]"

    async def test_async_handler_and_provider(self) -> None:
        async def get(ctx: RequestContext) -> None:
            ctx.response.end("async")

        async def load() -> dict[str, Any]:
            return {"get": get}

        d = Dispatcher({"/": load})
        assert (await d.handle(Request.build("/"))).text == "async"

    async def test_handler_set_provider(self) -> None:
        d = Dispatcher({"/": lambda: HandlerSet({HTTPMethod.GET: _echo_params})})
        assert (await d.handle(Request.build("/"))).status == 200

    def test_match_scans_pages_first(self) -> None:
        d = Dispatcher(
            {"/about": _routes(get=_echo_params)},
            {"/about": lambda: {"html": "page"}},
            page_renderer=_StaticPages(),
        )
        match = d.match("/about")
        assert match is not None
        assert match.entry.kind is RouteKind.PAGE


class TestMethods:
    async def test_method_selects_handler(self) -> None:
        def get(ctx: RequestContext) -> None:
            ctx.response.end("get")

        def post(ctx: RequestContext) -> None:
            ctx.response.status_code = 201
            ctx.response.end("post")

        d = Dispatcher({"/items": _routes(get=get, post=post)})
        assert (await d.handle(Request.build("/items", "GET"))).text == "get"
        response = await d.handle(Request.build("/items", "POST"))
        assert response.status == 201
        assert response.text == "post"

    async def test_missing_method_defaults_to_get(self) -> None:
        def get(ctx: RequestContext) -> None:
            ctx.response.end(ctx.method)

        d = Dispatcher({"/": _routes(get=get)})
        assert (await d.handle(Request.build("/", None))).text == "GET"

    async def test_all_fallback(self) -> None:
        def everything(ctx: RequestContext) -> None:
            ctx.response.end(f"all:{ctx.method}")

        d = Dispatcher({"/": _routes(all=everything)})
        assert (await d.handle(Request.build("/", "DELETE"))).text == "all:DELETE"

    async def test_unknown_method_uses_all(self) -> None:
        def everything(ctx: RequestContext) -> None:
            ctx.response.end("all")

        d = Dispatcher({"/": _routes(all=everything)})
        assert (await d.handle(Request.build("/", "TRACE"))).text == "all"

    async def test_method_not_allowed(self) -> None:
        d = Dispatcher({"/items": _routes(get=_echo_params, post=_echo_params)})
        response = await d.handle(Request.build("/items", "PUT"))
        assert response.status == 405
        assert response.text == "Method not allowed"
        assert response.header("allow") == "GET, POST"
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_empty_handler_set_is_405(self) -> None:
        d = Dispatcher({"/items": _routes()})
        response = await d.handle(Request.build("/items"))
        assert response.status == 405
        assert response.header("allow") is None


class TestNotFound:
    async def test_no_route(self) -> None:
        d = Dispatcher({"/about": _routes(get=_echo_params)})
        response = await d.handle(Request.build("/contact"))
        assert response.status == 404
        assert response.text == "Not found"
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_empty_dispatcher(self) -> None:
        response = await Dispatcher().handle(Request.build("/"))
        assert response.status == 404


class TestFailures:
    async def test_handler_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        def get(ctx: RequestContext) -> None:
            raise RuntimeError("secret database password")

        d = Dispatcher({"/": _routes(get=get)})
        with caplog.at_level(logging.ERROR, logger="wren.server"):
            response = await d.handle(Request.build("/"))

        assert response.status == 500
        assert response.text == "Internal server error"
        assert "secret" not in response.text
        assert any("GET /" in record.getMessage() for record in caplog.records)

    async def test_original_error_is_chained_in_log(self, caplog: pytest.LogCaptureFixture) -> None:
        def get(ctx: RequestContext) -> None:
            raise RuntimeError("boom")

        d = Dispatcher({"/": _routes(get=get)})
        with caplog.at_level(logging.ERROR, logger="wren.server"):
            await d.handle(Request.build("/"))

        record = caplog.records[-1]
        assert record.exc_info is not None
        assert isinstance(record.exc_info[1].__cause__, RuntimeError)

    async def test_provider_exception_is_500(self) -> None:
        def load() -> None:
            raise ImportError("cannot load")

        d = Dispatcher({"/": load})
        response = await d.handle(Request.build("/"))
        assert response.status == 500
        assert response.text == "Internal server error"

    async def test_http_error_from_handler_is_500(self) -> None:
        def get(ctx: RequestContext) -> None:
            raise RouteNotFound()

        d = Dispatcher({"/": _routes(get=get)})
        assert (await d.handle(Request.build("/"))).status == 500

    async def test_unterminated_response_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        def get(ctx: RequestContext) -> None:
            ctx.response.status_code = 201
            ctx.response.set_header("X-Partial", "1")

        d = Dispatcher({"/": _routes(get=get)})
        with caplog.at_level(logging.ERROR, logger="wren.server"):
            response = await d.handle(Request.build("/"))

        assert response.status == 500
        assert response.text == "Internal server error"
        assert response.header("x-partial") is None
        assert caplog.records

    async def test_write_after_end_is_500(self) -> None:
        def get(ctx: RequestContext) -> None:
            ctx.response.end("one")
            ctx.response.end("two")

        d = Dispatcher({"/": _routes(get=get)})
        assert (await d.handle(Request.build("/"))).status == 500

    async def test_handler_response_is_not_post_processed(self) -> None:
        def get(ctx: RequestContext) -> None:
            ctx.response.status_code = 404
            ctx.response.end("custom missing")

        d = Dispatcher({"/": _routes(get=get)})
        response = await d.handle(Request.build("/"))
        assert response.status == 404
        assert response.text == "custom missing"
        assert response.headers == ()


class TestPages:
    async def test_page_rendered(self) -> None:
        d = Dispatcher(page_routes={"/": lambda: {"html": "home"}}, page_renderer=_StaticPages())
        response = await d.handle(Request.build("/"))
        assert response.status == 200
        assert response.text == "<p>home {}</p>"
        assert response.content_type == "text/html; charset=utf-8"

    async def test_pages_before_apis(self) -> None:
        d = Dispatcher(
            {"/about": _routes(get=_echo_params)},
            {"/about": lambda: {"html": "page"}},
            page_renderer=_StaticPages(),
        )
        response = await d.handle(Request.build("/about"))
        assert response.text.startswith("<p>page")

    async def test_page_catch_all_shadows_specific_api(self) -> None:
        d = Dispatcher(
            {"/api/users": _routes(get=_echo_params)},
            {"/$$all": lambda: {"html": "spa"}},
            page_renderer=_StaticPages(),
        )
        response = await d.handle(Request.build("/api/users"))
        assert response.text.startswith("<p>spa")

    async def test_falls_through_to_api(self) -> None:
        d = Dispatcher(
            {"/api/users": _routes(get=_echo_params)},
            {"/": lambda: {"html": "home"}},
            page_renderer=_StaticPages(),
        )
        response = await d.handle(Request.build("/api/users"))
        assert response.text == "[]"

    async def test_pages_ignore_method(self) -> None:
        d = Dispatcher(page_routes={"/": lambda: {"html": "home"}}, page_renderer=_StaticPages())
        assert (await d.handle(Request.build("/", "POST"))).status == 200

    async def test_render_failure_is_500(self) -> None:
        d = Dispatcher(page_routes={"/": lambda: {}}, page_renderer=_StaticPages())
        response = await d.handle(Request.build("/"))
        assert response.status == 500
        assert response.text == "Internal server error"

    async def test_context_var_set_during_render(self) -> None:
        class CurrentPath:
            async def render(self, page: Any, ctx: RequestContext) -> str:
                return f"<p>{get_context().path} {get_context().params}</p>"

        d = Dispatcher(page_routes={"/docs/$$slug": lambda: {}}, page_renderer=CurrentPath())
        response = await d.handle(Request.build("/docs/a/b"))
        assert response.text == "<p>/docs/a/b {'slug': 'a/b'}</p>"
        with pytest.raises(LookupError):
            get_context()

    def test_pages_require_renderer(self) -> None:
        with pytest.raises(ConfigurationError, match="page_renderer"):
            Dispatcher(page_routes={"/": lambda: {"html": "x"}})


class TestConstruction:
    def test_malformed_pattern_aborts(self) -> None:
        with pytest.raises(MalformedPattern):
            Dispatcher({"/$$rest/x": _routes()})

    def test_prebuilt_table(self) -> None:
        table = RouteTable.build({"/": _routes(get=_echo_params)})
        assert Dispatcher(table).api_table is table

    def test_prebuilt_table_wrong_band(self) -> None:
        table = RouteTable.build({"/": _routes()}, RouteKind.PAGE)
        with pytest.raises(ConfigurationError):
            Dispatcher(table)

    def test_tables_priority_order(self) -> None:
        d = Dispatcher({"/": _routes()})
        assert [t.kind for t in d.tables] == [RouteKind.PAGE, RouteKind.API]

    def test_custom_error_content_type(self) -> None:
        config = DispatcherConfig(error_content_type="text/plain")
        assert Dispatcher(config=config).config.error_content_type == "text/plain"


class TestConcurrencyProperties:
    async def test_repeated_dispatch_is_idempotent(self) -> None:
        d = Dispatcher(
            {
                "/posts/$id": _routes(get=_echo_params),
                "/posts/new": _routes(get=_echo_params),
                "/$$all": _routes(get=_echo_params),
            }
        )
        paths = ["/posts/1", "/posts/new", "/x/y", "/posts/1/"]
        first = [await d.handle(Request.build(p)) for p in paths]
        second = [await d.handle(Request.build(p)) for p in paths]
        assert first == second

    async def test_context_var_set_during_handler(self) -> None:
        seen: list[RequestContext] = []

        def get(ctx: RequestContext) -> None:
            seen.append(get_context())
            ctx.response.end()

        d = Dispatcher({"/": _routes(get=get)})
        await d.handle(Request.build("/"))
        assert seen[0].path == "/"
        with pytest.raises(LookupError):
            get_context()

    async def test_interleaved_requests_keep_their_own_params(self) -> None:
        async def get(ctx: RequestContext) -> None:
            # Later ids finish first so every request suspends across others.
            await asyncio.sleep(0.001 * (20 - int(ctx.params["id"])))
            ctx.response.end(f"{ctx.params['id']} {get_context().params['id']}")

        d = Dispatcher({"/items/$id": _routes(get=get)})
        responses = await asyncio.gather(*(d.handle(Request.build(f"/items/{i}")) for i in range(20)))
        assert [r.text for r in responses] == [f"{i} {i}" for i in range(20)]
        assert all(r.status == 200 for r in responses)
