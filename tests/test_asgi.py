"""Tests for wren.server — the ASGI adapter, end to end through TestClient."""

from typing import Any

from wren.context import RequestContext
from wren.dispatcher import Dispatcher
from wren.http.response import Response
from wren.server.sender import send_response
from wren.testing import TestClient


def _hello(ctx: RequestContext) -> None:
    ctx.response.set_header("Content-Type", "text/plain")
    ctx.response.end(f"hello {ctx.params.get('name', 'world')}")


async def _echo_body(ctx: RequestContext) -> None:
    data = await ctx.request.json()
    ctx.response.end(f"{ctx.method} {data['n']}")


def _make_dispatcher() -> Dispatcher:
    return Dispatcher(
        {
            "/hello/$name?": lambda: {"get": _hello, "head": _hello},
            "/echo": lambda: {"post": _echo_body, "put": _echo_body},
        }
    )


class TestHTTP:
    async def test_get(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.get("/hello/ada")
        assert response.status == 200
        assert response.text == "hello ada"
        assert response.header("content-length") == "9"

    async def test_query_string_is_not_part_of_path(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.get("/hello?x=1")
        assert response.text == "hello world"

    async def test_post_json(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.post("/echo", json={"n": 3})
        assert response.text == "POST 3"

    async def test_put_body(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.put("/echo", body=b'{"n": 4}')
        assert response.text == "PUT 4"

    async def test_head_sends_no_body(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.head("/hello/ada")
        assert response.status == 200
        assert response.body == b""
        assert response.header("content-length") == "9"

    async def test_missing_method_defaults_to_get(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.request(None, "/hello/bob")
        assert response.text == "hello bob"

    async def test_not_found(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.get("/nope")
        assert response.status == 404
        assert response.text == "Not found"

    async def test_method_not_allowed(self) -> None:
        async with TestClient(_make_dispatcher()) as client:
            response = await client.delete("/echo")
        assert response.status == 405
        assert response.header("allow") == "POST, PUT"


class TestLifespan:
    async def test_startup_and_shutdown_acknowledged(self) -> None:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return incoming.pop(0)

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await _make_dispatcher()({"type": "lifespan"}, receive, send)
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_other_scopes_ignored(self) -> None:
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "websocket.connect"}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await _make_dispatcher()({"type": "websocket", "path": "/"}, receive, send)
        assert sent == []


class TestSendResponse:
    async def _send(self, response: Response, *, head: bool = False) -> list[dict[str, Any]]:
        sent: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await send_response(response, send, head=head)
        return sent

    async def test_content_length_recomputed(self) -> None:
        sent = await self._send(Response(b"abc", headers=(("Content-Length", "99"),)))
        assert sent[0]["headers"] == [(b"content-length", b"3")]
        assert sent[1]["body"] == b"abc"

    async def test_no_body_for_204(self) -> None:
        sent = await self._send(Response(b"ignored", status=204))
        assert sent[0]["status"] == 204
        assert sent[1]["body"] == b""

    async def test_header_names_lowercased(self) -> None:
        sent = await self._send(Response(b"", headers=(("X-Custom", "V"),)))
        assert (b"x-custom", b"V") in sent[0]["headers"]
