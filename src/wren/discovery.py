"""Filesystem route discovery for a ``routes/`` directory.

Walks the directory tree and maps route files to patterns:

- ``*.api.py`` files become api routes,
- ``*.page.py`` files become page routes,
- the path relative to the directory is the pattern, with ``index``
  collapsing to its parent.

File and directory names carry the pattern DSL directly::

    routes/
      index.page.py          # /
      about.page.py          # /about
      users/
        index.api.py         # /users
        $id.api.py           # /users/$id
      files/
        $$rest.api.py        # /files/$$rest

Names starting with ``_`` or ``.`` are skipped. Modules are not imported
here; each route gets a ``ModuleProvider`` that loads it on first use.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from wren.config import DispatcherConfig
from wren.errors import ConfigurationError
from wren.providers import ModuleProvider

logger = logging.getLogger("wren.discovery")

_MODULE_NAME_RE = re.compile(r"\W")


@dataclass(frozen=True, slots=True)
class DiscoveredRoutes:
    """Providers found under a routes directory, keyed by pattern."""

    api: dict[str, ModuleProvider] = field(default_factory=dict)
    pages: dict[str, ModuleProvider] = field(default_factory=dict)


def normalize_route_key(key: str, prefix: str = "./routes", suffix: str = ".api.py") -> str:
    """Turn a route module key into a route pattern.

    Strips *prefix* and *suffix*, then collapses a trailing ``/index``
    to its parent::

        normalize_route_key("./routes/users/$id.api.py")   -> "/users/$id"
        normalize_route_key("./routes/users/index.api.py") -> "/users"
        normalize_route_key("./routes/index.api.py")       -> "/"

    Raises:
        ConfigurationError: if *key* lacks the prefix or suffix.
    """
    if not key.startswith(prefix) or not key.endswith(suffix):
        msg = f"Route key {key!r} does not match {prefix!r}...{suffix!r}"
        raise ConfigurationError(msg)

    pattern = key[len(prefix) : len(key) - len(suffix)]
    if pattern.endswith("/index"):
        pattern = pattern[: -len("/index")]
    return pattern or "/"


def _module_name(kind: str, relative: str) -> str:
    return f"_wren_{kind}_{_MODULE_NAME_RE.sub('_', relative)}"


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(("_", ".")) for part in relative.parts)


def discover_routes(
    routes_dir: str | Path,
    config: DispatcherConfig | None = None,
) -> DiscoveredRoutes:
    """Walk *routes_dir* and build providers for every route file.

    Args:
        routes_dir: Path to the ``routes/`` directory.
        config: Supplies the key prefix and the api/page suffixes.

    Returns:
        A :class:`DiscoveredRoutes` ready to pass to ``Dispatcher``.

    Raises:
        FileNotFoundError: if *routes_dir* is not a directory.
    """
    config = config or DispatcherConfig()
    root = Path(routes_dir).resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Routes directory not found: {root}")

    found = DiscoveredRoutes()
    bands = (
        ("api", config.api_suffix, found.api),
        ("page", config.page_suffix, found.pages),
    )

    for file in sorted(root.rglob("*.py")):
        relative = file.relative_to(root)
        if _is_hidden(relative):
            continue

        key = f"{config.routes_prefix}/{relative.as_posix()}"
        for kind, suffix, target in bands:
            if not key.endswith(suffix):
                continue
            pattern = normalize_route_key(key, config.routes_prefix, suffix)
            target[pattern] = ModuleProvider(file, _module_name(kind, relative.as_posix()))
            logger.debug("Discovered %s route %s -> %s", kind, pattern, relative)
            break

    return found
