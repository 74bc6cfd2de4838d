"""App lookup for the CLI: ``module:attribute`` or ``path/to/app.py:attribute``.

Waypoint apps often live in a script next to the page they drive
(``examples/inbox/app.py``) rather than in an importable package, so a
path ending in ``.py`` is loaded straight from the file.
"""

import importlib
import importlib.util
from pathlib import Path
from types import ModuleType

from waypoint.app import App


def _split(target: str) -> tuple[str, str]:
    location, sep, attr_name = target.rpartition(":")
    # "C:\\apps\\inbox.py" or a bare module name: no attribute given
    if not sep or not location or "/" in attr_name or "\\" in attr_name:
        return target, "app"
    return location, attr_name or "app"


def _load(location: str) -> ModuleType:
    if not location.endswith(".py"):
        return importlib.import_module(location)
    path = Path(location)
    if not path.is_file():
        msg = f"No such app file: {location}"
        raise ModuleNotFoundError(msg)
    spec = importlib.util.spec_from_file_location(f"waypoint_app_{path.stem}", path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load {location} as a module"
        raise ModuleNotFoundError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def resolve_app(target: str) -> App:
    """Find the waypoint App named by *target*.

    ``"inbox"`` and ``"inbox:app"`` import the module; ``"inbox/app.py"``
    runs the file. The attribute defaults to ``app``. A callable that is
    not an App is treated as a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module or file cannot be found.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the attribute is neither an App nor a factory for one.
    """
    location, attr_name = _split(target)
    obj = getattr(_load(location), attr_name)

    if callable(obj) and not isinstance(obj, App):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"App factory {target!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{target!r} is a {type(obj).__name__}, not a waypoint App"
        raise TypeError(msg)
    return obj
