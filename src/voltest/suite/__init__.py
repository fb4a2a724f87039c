"""Run configuration, group registry and suite execution."""
from .loader import build_config, load_config, resolve_connector, select_groups
from .models import GroupConfig, GroupResult, ProbeContext, SuiteConfig
from .registry import GroupRegistry, register_group, registry
from .runner import run_suite

__all__ = [
    "GroupConfig",
    "GroupRegistry",
    "GroupResult",
    "ProbeContext",
    "SuiteConfig",
    "build_config",
    "load_config",
    "register_group",
    "registry",
    "resolve_connector",
    "run_suite",
    "select_groups",
]
