"""YAML loader and validation for run configurations."""
from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import yaml

from voltest.core import GeneratorLimits, InvalidArgument

from .models import GroupConfig, SuiteConfig
from .schema import config_validator

_logger = logging.getLogger(__name__)

CONNECTOR_ENV = "VOLTEST_CONNECTOR"
DEFAULT_CONNECTOR = "native"
DEFAULT_GROUPS = ("datatype", "dataspace")


def load_config(path: str) -> SuiteConfig:
    """Load and validate a run configuration file."""

    config_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Configuration file must contain a mapping at the top level")
    return build_config(raw, source=config_path)


def build_config(raw: Mapping[str, Any], *, source: Optional[Path] = None) -> SuiteConfig:
    errors = sorted(config_validator.iter_errors(dict(raw)), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Configuration schema validation failed: {messages}")
    try:
        limits = GeneratorLimits.from_mapping(raw.get("limits"))
    except InvalidArgument as exc:
        raise ValueError(f"limits: {exc}") from exc
    groups = _parse_groups(raw.get("groups"))
    _logger.debug("loaded configuration from %s with groups %s", source or "<mapping>", [g.name for g in groups])
    return SuiteConfig(
        connector=raw.get("connector"),
        seed=raw.get("seed"),
        limits=limits,
        groups=groups,
        fail_fast=bool(raw.get("fail_fast", False)),
        source=source,
    )


def _parse_groups(raw: Any) -> tuple[GroupConfig, ...]:
    if raw is None:
        return tuple(GroupConfig(name=name) for name in DEFAULT_GROUPS)
    groups: list[GroupConfig] = []
    seen: set[str] = set()
    for entry in raw:
        if isinstance(entry, str):
            group = GroupConfig(name=entry.strip())
        else:
            group = GroupConfig(
                name=str(entry["name"]).strip(),
                target=entry.get("target"),
                params=dict(entry.get("params") or {}),
            )
        if group.name in seen:
            raise ValueError(f"Duplicate test group '{group.name}'")
        seen.add(group.name)
        groups.append(group)
    if not groups:
        raise ValueError("groups cannot be empty")
    return tuple(groups)


def select_groups(config: SuiteConfig, names: Sequence[str]) -> SuiteConfig:
    """Restrict ``config`` to ``names``; unknown names become plain registry lookups."""

    if not names:
        return config
    by_name = {group.name: group for group in config.groups}
    groups = tuple(by_name.get(name, GroupConfig(name=name)) for name in names)
    return dataclasses.replace(config, groups=groups)


def resolve_connector(explicit: Optional[str] = None) -> str:
    """Pick the connector under test: explicit value, then environment, then native."""

    if explicit:
        return explicit
    from_env = os.environ.get(CONNECTOR_ENV)
    if from_env:
        return from_env
    print(f"No connector selected; using {DEFAULT_CONNECTOR} connector", file=sys.stderr)
    return DEFAULT_CONNECTOR
