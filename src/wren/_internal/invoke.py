"""Invoke helpers — call sync or async callables uniformly.

Route handlers, page entry points and provider callables can each be
``def`` or ``async def``. Anything that calls user code goes through
``invoke`` so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    await invoke(handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync — runs to completion on the event loop
        def get(ctx):
            ctx.response.end("hello")

        # async — the coroutine is awaited before returning
        async def get(ctx):
            user = await load_user(ctx.params["id"])
            ctx.response.end(user.name)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
