"""Resolution of ``module:attr`` test group targets."""
from __future__ import annotations

import importlib
from typing import Callable


def load_target(target: str) -> Callable[..., int]:
    """Import ``module:attr`` and return the callable it names.

    ``attr`` may be dotted to reach into a class or namespace inside the
    module (``pkg.groups:Suite.run``).
    """

    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Test group target '{target}' must have the form 'module:attr'")
    obj = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise ValueError(f"Test group target '{target}': '{attr}' not found") from exc
    if not callable(obj):
        raise TypeError(f"Test group target '{target}' is not callable")
    return obj
