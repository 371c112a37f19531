"""Wren — a file-route-style HTTP dispatcher for ASGI.

Route patterns such as ``/users/$id`` and ``/files/$$rest`` are compiled
once, sorted most-specific-first, and matched with a linear scan. Each
request resolves to exactly one handler or page.

Basic usage::

    from wren import Dispatcher

    def get(ctx):
        ctx.response.end(f"user {ctx.params['id']}")

    dispatcher = Dispatcher({"/users/$id": lambda: {"get": get}})

Run it under any ASGI server, or ``wren run myapp:dispatcher``.

File-based routes::

    dispatcher = Dispatcher.from_directory("routes")
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Dispatcher",
    "DispatcherConfig",
    "HTTPError",
    "HTTPMethod",
    "HandlerFailure",
    "HandlerSet",
    "MalformedPattern",
    "MethodNotSupported",
    "Request",
    "RequestContext",
    "Response",
    "ResponseWriter",
    "RouteNotFound",
    "RouteTable",
    "WrenError",
    "compare_patterns",
    "compile_pattern",
    "get_context",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Dispatcher":
        from wren.dispatcher import Dispatcher

        return Dispatcher

    if name == "DispatcherConfig":
        from wren.config import DispatcherConfig

        return DispatcherConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "ResponseWriter"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("RequestContext", "get_context"):
        from wren import context as _ctx

        return getattr(_ctx, name)

    if name == "HandlerSet":
        from wren.providers import HandlerSet

        return HandlerSet

    if name == "HTTPMethod":
        from wren.routing.methods import HTTPMethod

        return HTTPMethod

    if name == "RouteTable":
        from wren.routing.table import RouteTable

        return RouteTable

    if name == "compile_pattern":
        from wren.routing.pattern import compile_pattern

        return compile_pattern

    if name == "compare_patterns":
        from wren.routing.compare import compare_patterns

        return compare_patterns

    if name in (
        "ConfigurationError",
        "HTTPError",
        "HandlerFailure",
        "MalformedPattern",
        "MethodNotSupported",
        "RouteNotFound",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
