"""Blog — file-routed pages and a JSON api.

Demonstrates route discovery, literal-over-capture precedence
(``/posts/new`` vs ``/posts/$id``), optional and catch-all captures,
per-method handlers with an ``all`` fallback, and the default document
shell.

Run:
    wren run examples/blog/routes
or:
    python app.py
"""

from pathlib import Path

from wren import Dispatcher, DispatcherConfig

ROUTES = Path(__file__).parent / "routes"

dispatcher = Dispatcher.from_directory(
    ROUTES,
    config=DispatcherConfig(document_title="wren blog"),
)


if __name__ == "__main__":
    from wren.server.dev import run_dev_server

    run_dev_server(dispatcher, dispatcher.config.host, dispatcher.config.port, reload=False)
