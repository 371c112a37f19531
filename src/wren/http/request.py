"""Requests as the dispatcher sees them.

A ``Request`` is frozen: ``method`` and ``path`` are all routing ever
reads. Handlers that need the body pull it through the request's
``BodyReader``, which drains the ASGI ``receive`` callable once.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from wren._internal.asgi import Receive
from wren.http.headers import Headers


def split_target(target: str) -> tuple[str, str]:
    """Split a request target into ``(path, query_string)``.

    The fragment is discarded and an empty path becomes ``/``::

        split_target("/a?b=1#c")  -> ("/a", "b=1")
    """
    target, _, _ = target.partition("#")
    path, _, query = target.partition("?")
    return path or "/", query


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


class BodyReader:
    """Reads a request body from ASGI ``http.request`` messages.

    ``chunks()`` streams; ``read()`` buffers the whole body and caches it,
    so repeated reads never touch ``receive`` again.
    """

    __slots__ = ("_buffered", "_receive")

    def __init__(self, receive: Receive = _no_body) -> None:
        self._receive = receive
        self._buffered: bytes | None = None

    async def chunks(self) -> AsyncIterator[bytes]:
        if self._buffered is not None:
            yield self._buffered
            return
        more = True
        while more:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                return
            more = message.get("more_body", False)
            chunk = message.get("body", b"")
            if chunk:
                yield chunk

    async def read(self) -> bytes:
        if self._buffered is None:
            self._buffered = b"".join([chunk async for chunk in self.chunks()])
        return self._buffered


@dataclass(frozen=True, slots=True)
class Request:
    """One incoming HTTP request.

    ``path`` never carries a query string or fragment and ``method`` is
    always upper-case, even when the transport omitted it.
    """

    method: str
    path: str
    query_string: str = ""
    headers: Headers = field(default_factory=Headers)
    http_version: str = "1.1"
    client: tuple[str, int] | None = None
    reader: BodyReader = field(default_factory=BodyReader, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """``path`` with the query string re-attached."""
        return f"{self.path}?{self.query_string}" if self.query_string else self.path

    async def body(self) -> bytes:
        return await self.reader.read()

    def stream(self) -> AsyncIterator[bytes]:
        return self.reader.chunks()

    async def text(self, encoding: str = "utf-8") -> str:
        return (await self.body()).decode(encoding)

    async def json(self) -> Any:
        return json.loads(await self.body())

    @classmethod
    def build(
        cls,
        target: str,
        method: str | None = None,
        *,
        headers: Headers | None = None,
        default_method: str = "GET",
    ) -> Request:
        """Make a body-less request from a raw target such as ``/users/1?x=2#top``.

        A missing method falls back to *default_method*.
        """
        path, query = split_target(target)
        return cls(
            method=(method or default_method).upper(),
            path=path,
            query_string=query,
            headers=headers or Headers(),
        )

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        *,
        default_method: str = "GET",
    ) -> Request:
        """Make a request from an ASGI HTTP scope.

        Servers send the path already split from the query string, but it
        is split again in case a fragment or ``?`` slipped through.
        """
        path, _ = split_target(scope.get("path") or "/")
        peer = scope.get("client")
        return cls(
            method=(scope.get("method") or default_method).upper(),
            path=path,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=Headers(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
            client=(peer[0], peer[1]) if peer else None,
            reader=BodyReader(receive),
        )
