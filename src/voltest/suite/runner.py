"""Executor running named test groups against a connector."""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np
from colorama import Fore, Style, init as colorama_init

from voltest.generators import resolve_seed
from voltest.utils import load_target

from .loader import resolve_connector
from .models import GroupConfig, GroupFunc, GroupResult, ProbeContext, SuiteConfig
from .registry import registry
from .schema import SCHEMA_VERSION, report_validator

_logger = logging.getLogger(__name__)


def run_suite(
    config: SuiteConfig,
    *,
    report_format: str = "terminal",
    report_path: str | None = None,
    use_color: bool = True,
    list_only: bool = False,
) -> int:
    """Run every configured group; returns the process exit code (0 success, 1 failures)."""

    colorama_init()
    groups = _resolve_groups(config.groups)
    if list_only:
        for group, _ in groups:
            print(group.name)
        return 0
    if not groups:
        print("No test groups selected.")
        return 1
    connector = resolve_connector(config.connector)
    seed = resolve_seed(config.seed)
    terminal = report_format == "terminal"
    if terminal:
        _print_parameters(config, connector, seed)
    master_rng = np.random.default_rng(seed)
    start = time.perf_counter()
    results: list[GroupResult] = []
    for group, func in groups:
        group_seed = int(master_rng.integers(0, 2**32 - 1))
        result = _execute_group(group, func, connector, group_seed, config)
        results.append(result)
        if terminal:
            _print_result(result, use_color=use_color)
        if config.fail_fast and not result.passed:
            _logger.info("stopping after failed group '%s'", group.name)
            break
    duration = time.perf_counter() - start
    nerrors = sum(result.errors for result in results)
    if terminal:
        _print_summary(nerrors, connector, use_color=use_color)
    else:
        _write_json_report(results, connector, seed, duration, report_path)
    return 0 if nerrors == 0 else 1


def _resolve_groups(configs: Sequence[GroupConfig]) -> List[Tuple[GroupConfig, GroupFunc]]:
    resolved: list[Tuple[GroupConfig, GroupFunc]] = []
    for group in configs:
        if group.target:
            func = load_target(group.target)
        else:
            func = registry.get(group.name)
        resolved.append((group, func))
    return resolved


def _execute_group(
    group: GroupConfig, func: GroupFunc, connector: str, seed: int, config: SuiteConfig
) -> GroupResult:
    start = time.perf_counter()
    context = ProbeContext(connector=connector, seed=seed, limits=config.limits, params=group.params)
    _logger.debug("running group '%s' with seed %d", group.name, seed)
    try:
        errors = int(func(context))
    except Exception as exc:
        _logger.exception("group '%s' raised", group.name)
        return GroupResult(
            name=group.name,
            status="error",
            errors=1,
            duration_s=time.perf_counter() - start,
            seed=seed,
            details=str(exc),
        )
    if errors < 0:
        _logger.error("group '%s' returned a negative error count (%d)", group.name, errors)
        return GroupResult(
            name=group.name,
            status="error",
            errors=1,
            duration_s=time.perf_counter() - start,
            seed=seed,
            details=f"negative error count {errors}",
        )
    status = "passed" if errors == 0 else "failed"
    details = "" if errors == 0 else f"{errors} error(s)"
    return GroupResult(
        name=group.name,
        status=status,
        errors=errors,
        duration_s=time.perf_counter() - start,
        seed=seed,
        details=details,
    )


def _print_parameters(config: SuiteConfig, connector: str, seed: int) -> None:
    print(f"Running tests with connector '{connector}'\n")
    print("Test parameters:")
    print(f"  - Seed: {seed}")
    if config.source:
        print(f"  - Configuration: '{config.source}'")
    for name, value in config.limits.to_dict().items():
        print(f"  - {name}: {value}")
    print("\n")


def _print_result(result: GroupResult, *, use_color: bool = True) -> None:
    label, color = _format_status(result.status, use_color=use_color)
    reset = Style.RESET_ALL if use_color else ""
    ms = result.duration_s * 1000
    print(f"{color}{label:<6}{reset} {result.name} ({ms:.2f} ms, seed={result.seed})")
    if result.details:
        print(f"    detail: {result.details}")


def _print_summary(nerrors: int, connector: str, *, use_color: bool = True) -> None:
    reset = Style.RESET_ALL if use_color else ""
    if nerrors:
        color = Fore.RED if use_color else ""
        plural = "S" if nerrors > 1 else ""
        print(f"{color}*** {nerrors} TEST{plural} FAILED WITH CONNECTOR '{connector}' ***{reset}")
    else:
        color = Fore.GREEN if use_color else ""
        print(f"{color}All tests passed with connector '{connector}'{reset}\n")


def _format_status(status: str, *, use_color: bool) -> tuple[str, str]:
    label = {"passed": "PASS", "failed": "FAIL", "error": "ERROR"}.get(status, status.upper())
    if not use_color:
        return label, ""
    color = Fore.GREEN if status == "passed" else Fore.RED if status == "failed" else Fore.YELLOW
    return label, color


def _write_json_report(
    results: Sequence[GroupResult], connector: str, seed: int, duration: float, path: str | None
) -> None:
    payload = {
        "schema_version": SCHEMA_VERSION,
        "connector": connector,
        "seed": seed,
        "summary": {
            "total": len(results),
            "passed": sum(1 for r in results if r.status == "passed"),
            "failed": sum(1 for r in results if r.status == "failed"),
            "errored": sum(1 for r in results if r.status == "error"),
            "errors": sum(r.errors for r in results),
            "duration_s": duration,
        },
        "groups": [
            {
                "name": r.name,
                "status": r.status,
                "errors": r.errors,
                "duration_ms": r.duration_s * 1000,
                "seed": r.seed,
                "details": r.details,
            }
            for r in results
        ],
    }
    report_validator.validate(payload)
    text = json.dumps(payload, indent=2)
    if path:
        Path(path).write_text(text, encoding="utf-8")
    else:
        print(text)
