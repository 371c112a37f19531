"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — receives a RequestContext, may be sync or async
Handler: TypeAlias = Callable[..., Any]

# Page entry point — returns the page body HTML, may be sync or async
PageEntry: TypeAlias = Callable[..., Any]
