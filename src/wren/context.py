"""Per-request context.

``RequestContext`` is what a handler receives: the request, the
write-once response and the captured path parameters. It lives for one
request only.

``context_var`` also exposes the current context to code deeper in the
call stack (``get_context()``). It is set by the dispatcher around
handler invocation and page rendering, and reset afterwards. Outside a
request, ``get_context()`` raises ``LookupError``.
"""

from contextvars import ContextVar
from dataclasses import dataclass, field

from wren.http.request import Request
from wren.http.response import ResponseWriter


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Everything a handler needs for one request."""

    request: Request
    response: ResponseWriter = field(default_factory=ResponseWriter)
    params: dict[str, str] = field(default_factory=dict)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path


context_var: ContextVar[RequestContext] = ContextVar("wren_context")
"""The current request context. Set by the dispatcher during invocation."""


def get_context() -> RequestContext:
    """Return the context of the request being handled.

    Raises ``LookupError`` if called outside a request.
    """
    return context_var.get()
