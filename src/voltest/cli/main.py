"""CLI entry point for voltest."""
from __future__ import annotations

import dataclasses
import json
import logging
import sys
from typing import Optional, Tuple

import click
import yaml

from voltest import __version__, bootstrap
from voltest.core import UNLIMITED, GenerationError, GeneratorLimits
from voltest.generators import ShapeGenerator, TypeDescriptorGenerator, make_rng, resolve_seed
from voltest.suite import build_config, load_config, run_suite, select_groups

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_logger = logging.getLogger(__name__)


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"voltest {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the voltest version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Randomized datatype and dataspace tests for storage connectors."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML run configuration.",
)
@click.option("--connector", type=str, help="Connector to test (overrides config and VOLTEST_CONNECTOR).")
@click.option("--groups", "group_filters", type=str, help="Comma-separated test groups to run.")
@click.option("--seed", type=click.IntRange(min=0), help="Master random seed (time-based by default).")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.option("--list", "list_only", is_flag=True, help="List selected test groups without running.")
@click.pass_obj
def run(
    state: CliState,
    config_path: Optional[str],
    connector: Optional[str],
    group_filters: Optional[str],
    seed: Optional[int],
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
    list_only: bool,
) -> None:
    """Run the selected test groups against a connector."""

    try:
        config = load_config(config_path) if config_path else build_config({})
        config = select_groups(config, _split_csv(group_filters))
        overrides = {}
        if connector:
            overrides["connector"] = connector
        if seed is not None:
            overrides["seed"] = seed
        if overrides:
            config = dataclasses.replace(config, **overrides)
        exit_code = run_suite(
            config,
            report_format=report_format or "terminal",
            report_path=report_path,
            use_color=not no_color,
            list_only=list_only,
        )
    except Exception as exc:  # pragma: no cover - CLI error translation
        _logger.debug("run failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(exit_code)


@cli.command("gen-type")
@click.option("--count", type=click.IntRange(min=1), default=1, show_default=True, help="Number of types.")
@click.option("--seed", type=click.IntRange(min=0), help="Random seed (time-based by default).")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Take limits from this configuration.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON descriptors instead of summaries.")
def gen_type(count: int, seed: Optional[int], config_path: Optional[str], as_json: bool) -> None:
    """Print randomly generated datatypes."""

    limits = _load_limits(config_path)
    seed = resolve_seed(seed)
    generator = TypeDescriptorGenerator(make_rng(seed), limits=limits)
    _logger.debug("generating %d datatype(s) with seed %d", count, seed)
    for _ in range(count):
        try:
            dtype = generator.generate_type()
        except GenerationError as exc:
            raise click.ClickException(str(exc)) from exc
        with generator.factory.closing(dtype):
            if as_json:
                click.echo(json.dumps(dtype.to_dict()))
            else:
                click.echo(f"{dtype.describe()} ({dtype.size} bytes)")


@cli.command("gen-shape")
@click.option("--rank", type=int, required=True, help="Number of dimensions.")
@click.option("--max-extents", "max_extents", type=str, help="Comma-separated maximum extents; 'unlimited' allowed.")
@click.option("--count", type=click.IntRange(min=1), default=1, show_default=True, help="Number of shapes.")
@click.option("--seed", type=click.IntRange(min=0), help="Random seed (time-based by default).")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Take limits from this configuration.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON descriptors instead of summaries.")
def gen_shape(
    rank: int,
    max_extents: Optional[str],
    count: int,
    seed: Optional[int],
    config_path: Optional[str],
    as_json: bool,
) -> None:
    """Print randomly generated dataspace shapes."""

    limits = _load_limits(config_path)
    bounds = _parse_max_extents(max_extents)
    generator = ShapeGenerator(make_rng(seed), limits=limits)
    for _ in range(count):
        try:
            shape = generator.generate_shape(rank, bounds)
        except GenerationError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(json.dumps(shape.to_dict()) if as_json else shape.describe())


@cli.command("limits")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Run configuration to read limits from.")
def show_limits(config_path: Optional[str]) -> None:
    """Print the effective generator limits as YAML."""

    limits = _load_limits(config_path)
    click.echo(yaml.safe_dump(limits.to_dict(), sort_keys=False), nl=False)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="voltest", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


def _load_limits(config_path: Optional[str]) -> GeneratorLimits:
    if not config_path:
        return GeneratorLimits()
    try:
        return load_config(config_path).limits
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def _parse_max_extents(value: Optional[str]) -> Optional[Tuple[int, ...]]:
    if value is None:
        return None
    bounds = []
    for part in _split_csv(value):
        if part.lower() in ("unlimited", "inf"):
            bounds.append(UNLIMITED)
            continue
        try:
            bounds.append(int(part))
        except ValueError as exc:
            raise click.BadParameter(f"Invalid maximum extent '{part}'", param_hint="--max-extents") from exc
    return tuple(bounds)


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
