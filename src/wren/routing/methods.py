"""HTTP method enum and the fixed lookup table used to pick handlers.

Handler sets are keyed by ``HTTPMethod`` rather than by attribute name, so
dispatch never indexes into a module with a request-derived string.
"""

from enum import Enum


class HTTPMethod(Enum):
    """Methods a handler set can declare. ``ALL`` is the any-method fallback."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    ALL = "ALL"

    @property
    def export_name(self) -> str:
        """Name of the module-level function that declares this method."""
        return _EXPORT_NAMES[self]


_EXPORT_NAMES: dict[HTTPMethod, str] = {
    HTTPMethod.GET: "get",
    HTTPMethod.POST: "post",
    HTTPMethod.PUT: "put",
    HTTPMethod.DELETE: "delete",
    HTTPMethod.PATCH: "patch",
    HTTPMethod.OPTIONS: "options",
    HTTPMethod.HEAD: "head",
    HTTPMethod.ALL: "all",
}

# Request method token -> enum member. ALL is deliberately absent: a client
# cannot ask for the fallback handler by name.
_REQUEST_METHODS: dict[str, HTTPMethod] = {
    member.value: member for member in HTTPMethod if member is not HTTPMethod.ALL
}


def parse_method(method: str | None, default: str = "GET") -> HTTPMethod | None:
    """Map a request method token to an ``HTTPMethod``.

    ``None`` or an empty token falls back to *default*. Returns ``None`` for
    methods no handler set can declare (e.g. ``TRACE``), which the
    dispatcher reports as 405.
    """
    token = (method or default).upper()
    return _REQUEST_METHODS.get(token)
