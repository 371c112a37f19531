"""Dispatcher resolution — turns a CLI argument into a Dispatcher.

Accepts either ``"module:attribute"`` (``"myapp"`` means
``myapp.dispatcher``) or the path of a routes directory, which is
discovered with the default configuration.
"""

import importlib
from pathlib import Path

from wren.dispatcher import Dispatcher


def resolve_dispatcher(target: str) -> Dispatcher:
    """Resolve *target* to a ``Dispatcher`` instance.

    Supports factory functions: if the resolved object is callable and
    not a Dispatcher, it is called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Dispatcher``.
    """
    if Path(target).is_dir():
        return Dispatcher.from_directory(target)

    module_path, _, attr_name = target.partition(":")
    if not attr_name:
        attr_name = "dispatcher"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Dispatcher):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {target!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Dispatcher):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a wren.Dispatcher instance"
        raise TypeError(msg)

    return obj
