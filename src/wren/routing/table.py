"""Route tables — compiled, specificity-ordered and immutable.

A ``RouteTable`` is built once from a ``{pattern: provider}`` mapping.
Construction compiles every pattern (malformed patterns fail here, not
at request time) and sorts the entries with ``compare_patterns``, so
``find()`` is a first-match linear scan.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from wren.providers import Provider, as_provider
from wren.routing.compare import specificity_key
from wren.routing.pattern import Matcher, compile_pattern

logger = logging.getLogger("wren.routing")


class RouteKind(Enum):
    """Which priority band a table belongs to. Pages are tried first."""

    PAGE = "page"
    API = "api"


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """One compiled route: its matcher, its provider and its band."""

    matcher: Matcher
    provider: Provider
    kind: RouteKind

    @property
    def pattern(self) -> str:
        return self.matcher.pattern


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful lookup."""

    entry: RouteEntry
    params: dict[str, str]


class RouteTable:
    """An ordered, read-only sequence of route entries.

    Usage::

        table = RouteTable.build({"/posts/$id": load_post, "/posts/new": load_new})
        match = table.find("/posts/new")   # the literal route wins
    """

    __slots__ = ("_entries", "kind")

    def __init__(self, entries: tuple[RouteEntry, ...] = (), kind: RouteKind = RouteKind.API) -> None:
        self._entries = entries
        self.kind = kind

    @classmethod
    def build(cls, routes: Mapping[str, Any], kind: RouteKind = RouteKind.API) -> "RouteTable":
        """Compile and sort a ``{pattern: provider}`` mapping.

        Providers may be ``Provider`` objects or zero-argument callables.

        Raises:
            MalformedPattern: if any pattern fails to compile.
            ConfigurationError: if any provider is unusable.
        """
        ordered = sorted(routes, key=specificity_key)
        entries = tuple(
            RouteEntry(
                matcher=compile_pattern(pattern),
                provider=as_provider(routes[pattern]),
                kind=kind,
            )
            for pattern in ordered
        )
        logger.debug("Built %s route table: %s", kind.value, [e.pattern for e in entries])
        return cls(entries, kind)

    def find(self, path: str) -> RouteMatch | None:
        """Return the first entry whose matcher accepts *path*."""
        for entry in self._entries:
            params = entry.matcher.match(path)
            if params is not None:
                return RouteMatch(entry=entry, params=params)
        return None

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        return self._entries

    @property
    def patterns(self) -> list[str]:
        """Patterns in match order."""
        return [entry.pattern for entry in self._entries]

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"RouteTable({self.kind.value}, {self.patterns!r})"
