"""Route providers and handler sets.

A provider is whatever a route table entry holds in place of a handler:
an object with an async ``resolve()`` that yields the route's handlers (api
routes) or its page module (page routes). Resolution happens per request,
so a provider may load its module lazily.

Usage::

    from wren.providers import CallableProvider, HandlerSet

    async def load_users():
        from myapp.routes import users
        return users

    provider = CallableProvider(load_users)
    handlers = HandlerSet.from_module(await provider.resolve())
"""

import importlib
import importlib.util
import sys
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any, Protocol, runtime_checkable

import anyio.to_thread

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.errors import ConfigurationError
from wren.routing.methods import HTTPMethod


@runtime_checkable
class Provider(Protocol):
    """Yields the handlers or page module for one route."""

    async def resolve(self) -> Any: ...


class CallableProvider:
    """Adapts a zero-argument callable (sync or async) to ``Provider``."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[[], Any]) -> None:
        self.func = func

    async def resolve(self) -> Any:
        return await invoke(self.func)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"CallableProvider({name})"


class ModuleProvider:
    """Loads a Python source file as a module on first resolve.

    The import runs in a worker thread via ``anyio.to_thread`` so a slow
    import never blocks the event loop. The module is loaded once and
    cached; concurrent first requests share the same load.
    """

    __slots__ = ("_lock", "_module", "module_name", "path")

    def __init__(self, path: str | Path, module_name: str | None = None) -> None:
        self.path = Path(path)
        self.module_name = module_name or f"_wren_route_{abs(hash(str(self.path))):x}"
        self._module: ModuleType | None = None
        self._lock = threading.Lock()

    def _load(self) -> ModuleType:
        with self._lock:
            if self._module is not None:
                return self._module

            spec = importlib.util.spec_from_file_location(self.module_name, self.path)
            if spec is None or spec.loader is None:
                msg = f"Cannot load route module from {self.path}"
                raise ImportError(msg)

            module = importlib.util.module_from_spec(spec)
            # Registered while executing so decorators that look the module
            # up by name (dataclasses, typing.get_type_hints) can find it.
            sys.modules[self.module_name] = module
            try:
                spec.loader.exec_module(module)
            except BaseException:
                sys.modules.pop(self.module_name, None)
                raise
            self._module = module
            return module

    async def resolve(self) -> ModuleType:
        if self._module is not None:
            return self._module
        return await anyio.to_thread.run_sync(self._load)

    def __repr__(self) -> str:
        return f"ModuleProvider({str(self.path)!r})"


def import_provider(module_path: str) -> CallableProvider:
    """A provider that imports *module_path* (dotted name) on resolve."""
    return CallableProvider(lambda: importlib.import_module(module_path))


def as_provider(value: Any) -> Provider:
    """Coerce a route table value into a ``Provider``.

    Accepts a ``Provider`` as-is and wraps zero-argument callables.

    Raises:
        ConfigurationError: if *value* is neither.
    """
    if isinstance(value, Provider):
        return value
    if callable(value):
        return CallableProvider(value)
    msg = f"Route provider must be a Provider or a callable, got {type(value).__name__}"
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class HandlerSet:
    """The per-method handlers an api route declares.

    Keyed by ``HTTPMethod``. ``HTTPMethod.ALL`` is the fallback used when
    the request method has no handler of its own.
    """

    handlers: Mapping[HTTPMethod, Handler] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "handlers", MappingProxyType(dict(self.handlers)))

    @classmethod
    def from_module(cls, module: Any) -> "HandlerSet":
        """Collect handlers exported by *module* under their method names.

        Looks up ``get``, ``post``, ``put``, ``delete``, ``patch``,
        ``options``, ``head`` and ``all``. Non-callables are ignored.
        A ``HandlerSet`` is returned unchanged.
        """
        if isinstance(module, HandlerSet):
            return module

        found: dict[HTTPMethod, Handler] = {}
        for method in HTTPMethod:
            if isinstance(module, Mapping):
                func = module.get(method.export_name, module.get(method))
            else:
                func = getattr(module, method.export_name, None)
            if func is not None and callable(func):
                found[method] = func
        return cls(found)

    def select(self, method: HTTPMethod | None) -> Handler | None:
        """Return the handler for *method*, falling back to ``ALL``."""
        if method is not None and method in self.handlers:
            return self.handlers[method]
        return self.handlers.get(HTTPMethod.ALL)

    @property
    def allowed(self) -> frozenset[str]:
        """Method names this set answers explicitly (``ALL`` excluded)."""
        return frozenset(m.value for m in self.handlers if m is not HTTPMethod.ALL)
