"""Page renderer protocol and page-module helpers."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from wren._internal.types import PageEntry

if TYPE_CHECKING:
    from wren.context import RequestContext


@runtime_checkable
class PageRenderer(Protocol):
    """Turns a resolved page module into a complete HTML document."""

    async def render(self, page: Any, ctx: RequestContext) -> str: ...


def page_entry(page: Any) -> PageEntry:
    """Return the callable that renders *page*'s body.

    A page module exports ``default``; a bare callable is its own entry.

    Raises:
        TypeError: if *page* has no callable entry point.
    """
    entry = getattr(page, "default", None)
    if entry is None and callable(page) and not inspect.ismodule(page):
        entry = page
    if entry is None or not callable(entry):
        msg = f"Page {page!r} does not export a callable 'default'"
        raise TypeError(msg)
    return entry


def page_kwargs(entry: PageEntry, ctx: RequestContext) -> dict[str, Any]:
    """Build keyword arguments for a page entry from its signature.

    Resolution order:
    1. ``ctx`` / ``context`` — the ``RequestContext``
    2. ``request`` — the ``Request``
    3. ``params`` — the full parameter mapping
    4. Path parameters, by name
    """
    sig = inspect.signature(entry)
    kwargs: dict[str, Any] = {}

    for name in sig.parameters:
        if name in ("ctx", "context"):
            kwargs[name] = ctx
        elif name == "request":
            kwargs[name] = ctx.request
        elif name == "params":
            kwargs[name] = ctx.params
        elif name in ctx.params:
            kwargs[name] = ctx.params[name]

    return kwargs
