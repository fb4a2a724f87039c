"""Test group registry keyed by group name."""
from __future__ import annotations

from typing import Callable, Dict, Iterable

from .models import GroupFunc


class GroupRegistry:
    """Maps group names to callables returning an error count."""

    def __init__(self) -> None:
        self._groups: Dict[str, GroupFunc] = {}

    def register(self, name: str, func: GroupFunc) -> GroupFunc:
        if name in self._groups:
            raise ValueError(f"Test group '{name}' already registered")
        self._groups[name] = func
        return func

    def update_or_register(self, name: str, func: GroupFunc) -> GroupFunc:
        self._groups[name] = func
        return func

    def get(self, name: str) -> GroupFunc:
        try:
            return self._groups[name]
        except KeyError as exc:
            available = ", ".join(sorted(self._groups)) or "<none>"
            raise KeyError(f"Test group '{name}' is not registered (available: {available})") from exc

    def __contains__(self, name: str) -> bool:
        return name in self._groups

    def names(self) -> Iterable[str]:
        return tuple(self._groups.keys())


registry = GroupRegistry()


def register_group(name: str) -> Callable[[GroupFunc], GroupFunc]:
    """Decorator registering the decorated function under ``name``."""

    def decorator(func: GroupFunc) -> GroupFunc:
        return registry.register(name, func)

    return decorator


def load_builtins() -> None:
    from . import builtin_groups

    for name, func in builtin_groups.BUILTIN_GROUPS:
        registry.update_or_register(name, func)
