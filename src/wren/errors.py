"""Wren exception hierarchy.

Shared across the pattern compiler, route tables, dispatcher and the ASGI
adapter so every module raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a route table or dispatcher is wired incorrectly.

    Raised at construction time, never while serving a request.
    """


class MalformedPattern(ConfigurationError):
    """A route pattern cannot be compiled.

    Patterns are static, so this surfaces when the route table is built.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Malformed route pattern {pattern!r}: {reason}")


class ResponseAlreadySent(WrenError):
    """A write was attempted on a response that has already ended."""


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher while resolving a request. The request
    pipeline converts these into terminal responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no pattern in any table accepts the request path."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotSupported(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the path matched but the route has no handler for the method.

    Carries an ``Allow`` header listing the methods the route declares.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "Method not allowed") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", allow_value),) if allow_value else (),
        )


class HandlerFailure(HTTPError):
    """500 — a provider, renderer or handler failed during processing.

    The original exception is chained as ``__cause__`` for logging; it is
    never exposed in the response body.
    """

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status=500, detail=detail)


class UnterminatedResponse(HandlerFailure):
    """500 — a handler returned without ending its response."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(detail=f"Handler for {method} {path} did not end the response")
