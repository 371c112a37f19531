"""Page rendering for page-band routes.

A page route's provider resolves to a page module whose ``default``
callable returns the page body HTML. The dispatcher hands that module to
a ``PageRenderer``, which turns it into a full HTML document.

Usage::

    from wren import Dispatcher
    from wren.pages import DocumentRenderer

    dispatcher = Dispatcher(
        api_routes={"/api/users/$id": load_users},
        page_routes={"/": load_home, "/about": load_about},
        page_renderer=DocumentRenderer(title="My site"),
    )
"""

from wren.pages.renderer import DocumentRenderer
from wren.pages.types import PageRenderer, page_entry

__all__ = [
    "DocumentRenderer",
    "PageRenderer",
    "page_entry",
]
