"""Default page renderer: document shell wrapping an app shell wrapping the page.

Composition, innermost first:

1. the page's ``default`` entry returns the body HTML;
2. the *app* template wraps it (navigation, main landmark);
3. the *document* template wraps that (``<html>``, ``<head>``, scripts);
4. ``<!DOCTYPE html>`` is prepended.

Both shells are kida templates compiled once when the renderer is built.
The page HTML is trusted markup and is inserted unescaped; everything
else goes through kida's autoescaping.
"""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING, Any

from kida import Environment
from kida.template import Markup

from wren._internal.invoke import invoke
from wren.pages.types import page_entry, page_kwargs

if TYPE_CHECKING:
    from wren.context import RequestContext

DEFAULT_DOCUMENT = """\
<html lang="{{ lang }}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width">
<title>{{ title }}</title>
{{ head }}
</head>
<body>
<div id="app">{{ content }}</div>
{{ scripts }}
</body>
</html>"""

DEFAULT_APP = """<div><main>{{ content }}</main></div>"""


class DocumentRenderer:
    """Render page modules into full HTML documents with kida.

    Args:
        title: ``<title>`` text.
        lang: ``<html lang>`` value.
        document_template: kida source for the outer document. Receives
            ``content``, ``title``, ``lang``, ``head``, ``scripts``.
        app_template: kida source for the app shell. Receives
            ``content`` and ``params``.
        scripts: Module script URLs appended to ``<body>`` (e.g. a client
            entry point for hydration).
        env: kida ``Environment`` to compile with. Defaults to an
            autoescaping environment.
    """

    __slots__ = ("_app", "_document", "_head", "_scripts", "lang", "title")

    def __init__(
        self,
        *,
        title: str = "wren",
        lang: str = "en",
        document_template: str = DEFAULT_DOCUMENT,
        app_template: str = DEFAULT_APP,
        scripts: tuple[str, ...] = (),
        head: str = "",
        env: Environment | None = None,
    ) -> None:
        env = env or Environment(autoescape=True)
        self._document = env.from_string(document_template)
        self._app = env.from_string(app_template)
        self._scripts = Markup(
            "\n".join(
                f'<script type="module" src="{escape(src, quote=True)}"></script>'
                for src in scripts
            )
        )
        self._head = Markup(head)
        self.title = title
        self.lang = lang

    async def render_body(self, page: Any, ctx: RequestContext) -> str:
        """Render just the page's own HTML, without any shell."""
        entry = page_entry(page)
        body = await invoke(entry, **page_kwargs(entry, ctx))
        return "" if body is None else str(body)

    async def render(self, page: Any, ctx: RequestContext) -> str:
        """Render *page* wrapped in the app and document shells."""
        body = await self.render_body(page, ctx)
        inner = self._app.render({"content": Markup(body), "params": ctx.params})
        document = self._document.render(
            {
                "content": Markup(inner),
                "title": self.title,
                "lang": self.lang,
                "head": self._head,
                "scripts": self._scripts,
            }
        )
        return "<!DOCTYPE html>" + document
