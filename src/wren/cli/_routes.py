"""``wren routes`` — list routes in the order they are matched.

Prints one row per route: priority band, pattern and captured
parameters. Page routes come first because they are tried first.
"""

import argparse
import sys

from wren.cli._resolve import resolve_dispatcher
from wren.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """Print the dispatcher's route tables in match order."""
    try:
        dispatcher = resolve_dispatcher(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str]] = []
    for table in dispatcher.tables:
        for entry in table:
            params = ", ".join(entry.matcher.param_names) or "-"
            rows.append((entry.kind.value, entry.pattern, params))

    if not rows:
        print("No routes registered.")
        return

    max_kind = max(max(len(r[0]) for r in rows), 4)  # "BAND" header
    max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_kind}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("BAND", "PATTERN", "PARAMS"))
    sep_len = max_kind + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for kind, pattern, params in rows:
        print(fmt.format(kind, pattern, params))
