"""Dispatcher configuration.

DispatcherConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DispatcherConfig:
    """Dispatcher configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatcherConfig(debug=True, port=3000)
    """

    # Dev server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Requests without a method are treated as this one
    default_method: str = "GET"

    # Content types for responses the dispatcher writes itself
    page_content_type: str = "text/html; charset=utf-8"
    error_content_type: str = "text/plain; charset=utf-8"

    # Route discovery: "<routes_prefix>/users/$id<api_suffix>" -> "/users/$id"
    routes_prefix: str = "./routes"
    api_suffix: str = ".api.py"
    page_suffix: str = ".page.py"

    # Default document shell
    document_title: str = "wren"
    document_lang: str = "en"
