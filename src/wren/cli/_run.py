"""``wren run`` — development server command.

Resolves the CLI argument to a Dispatcher and serves it with pounce.
"""

import argparse
import sys
from pathlib import Path

from wren.cli._resolve import resolve_dispatcher
from wren.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Start the dev server for ``args.app``.

    ``--host`` and ``--port`` override the dispatcher's config. A routes
    directory is added to the reload watch list; an import string is
    re-imported on reload.
    """
    try:
        dispatcher = resolve_dispatcher(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from wren.server.dev import run_dev_server

    is_directory = Path(args.app).is_dir()
    run_dev_server(
        dispatcher,
        host=args.host or dispatcher.config.host,
        port=args.port or dispatcher.config.port,
        reload=not args.no_reload,
        reload_dirs=(args.app,) if is_directory else (),
        app_path=None if is_directory else args.app,
    )
