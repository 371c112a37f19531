"""HTTP responses.

Two types:

``ResponseWriter``
    What a handler writes to. Mutable until ``end()`` is called, then
    sealed: one terminal response per request.
``Response``
    The frozen result, built from an ended writer or directly by the
    dispatcher for its own 404/405/500 answers.
"""

from dataclasses import dataclass, replace

from wren.errors import ResponseAlreadySent

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """A complete HTTP response.

    Headers keep their insertion order and original casing; lookups
    through ``header()`` are case-insensitive.
    """

    body: bytes = b""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def plain(
        cls, body: str, status: int = 200, content_type: str = TEXT_CONTENT_TYPE
    ) -> "Response":
        """A plain-text response, as used for the dispatcher's own errors."""
        return cls(
            body=body.encode("utf-8"),
            status=status,
            headers=(("Content-Type", content_type),),
        )

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name*."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


class ResponseWriter:
    """Write-once response handle passed to handlers.

    Set ``status_code`` and headers, then call ``end(body)`` exactly once.
    Any write after ``end()`` raises ``ResponseAlreadySent``.

    Usage::

        def get(ctx):
            ctx.response.status_code = 201
            ctx.response.set_header("Content-Type", "application/json")
            ctx.response.end('{"ok": true}')
    """

    __slots__ = ("_body", "_ended", "_headers", "_status_code")

    def __init__(self) -> None:
        self._status_code = 200
        self._headers: list[tuple[str, str]] = []
        self._body = b""
        self._ended = False

    def _check_open(self) -> None:
        if self._ended:
            msg = "Response has already ended"
            raise ResponseAlreadySent(msg)

    @property
    def status_code(self) -> int:
        return self._status_code

    @status_code.setter
    def status_code(self, value: int) -> None:
        self._check_open()
        self._status_code = value

    @property
    def ended(self) -> bool:
        """True once a terminal response has been written."""
        return self._ended

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any existing value with the same name."""
        self._check_open()
        lower = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != lower]
        self._headers.append((name, value))

    def append_header(self, name: str, value: str) -> None:
        """Add a header value without replacing earlier ones."""
        self._check_open()
        self._headers.append((name, value))

    def get_header(self, name: str) -> str | None:
        lower = name.lower()
        for key, value in self._headers:
            if key.lower() == lower:
                return value
        return None

    def remove_header(self, name: str) -> None:
        self._check_open()
        lower = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != lower]

    def end(self, body: str | bytes = b"") -> None:
        """Write the body and seal the response."""
        self._check_open()
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        self._ended = True

    def to_response(self) -> Response:
        """Snapshot the writer as a frozen ``Response``."""
        return Response(
            body=self._body,
            status=self._status_code,
            headers=tuple(self._headers),
        )
