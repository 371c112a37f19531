"""Read-only request headers with case-insensitive lookup."""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Request headers as a read-only ``Mapping``.

    Built from the raw ASGI byte pairs. Names are lower-cased once on
    construction; a repeated header keeps every value, and plain
    indexing returns the first.
    """

    __slots__ = ("_index", "_pairs")

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        pairs = tuple((name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw)
        index: dict[str, list[str]] = {}
        for name, value in pairs:
            index.setdefault(name, []).append(value)
        self._pairs = pairs
        self._index = index

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> "Headers":
        """Build headers from a plain ``str -> str`` mapping."""
        return cls((name.encode("latin-1"), value.encode("latin-1")) for name, value in headers.items())

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in arrival order."""
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Header pairs re-encoded as ASGI bytes, names lower-cased."""
        return tuple((name.encode("latin-1"), value.encode("latin-1")) for name, value in self._pairs)

    def __repr__(self) -> str:
        return f"Headers({dict(self._pairs)!r})"
