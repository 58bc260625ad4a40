"""
Argon2TheMax Command Line Interface
Main entry point for calibration, selection, and tuning.
"""

import json
import logging
import platform
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import click

from argon2themax import __version__
from argon2themax.calibration import CalibrationPolicyType
from argon2themax.core.config import DEFAULT_CONFIG, TuningConfig, load_config
from argon2themax.core.errors import NoSampleWithinBudgetError, TuningError
from argon2themax.core.schema import Sample, SampleSeries, Variant
from argon2themax.core.utils import (
    SystemResources,
    default_parallelism,
    format_size,
    memory_ceiling_exponent,
    safe_json_dump,
)
from argon2themax.primitive import Argon2Primitive
from argon2themax.selection import SelectionPolicyType, describe_selection, get_selection_engine
from argon2themax.tuner import Tuner

CALIBRATION_CHOICES = [p.value for p in CalibrationPolicyType]
SELECTION_CHOICES = [p.value for p in SelectionPolicyType]
VARIANT_CHOICES = [v.value for v in Variant]
BUDGET_RANGE = click.FloatRange(min=0, min_open=True)


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def _config(ctx: click.Context) -> TuningConfig:
    return ctx.obj.get("config", DEFAULT_CONFIG) if ctx.obj else DEFAULT_CONFIG


def _echo_sample(sample: Sample) -> bool:
    params = sample.parameters
    click.echo(
        f"  {sample.elapsed_ms:9.2f} ms | memory 2^{params.memory_cost} KiB "
        f"({format_size(params.memory_kib * 1024)}) | time {params.time_cost} "
        f"| lanes {params.parallelism} | cost {sample.derived_cost}"
    )
    return True


@click.group()
@click.version_option(__version__, prog_name="argon2themax")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(),
              help="YAML tuning config")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str]) -> None:
    """
    Argon2TheMax

    Find the strongest Argon2 parameters that hash within a time budget.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)

    try:
        ctx.obj["config"] = load_config(config_path)
    except TuningError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.option("--budget", "-b", type=BUDGET_RANGE, default=None, help="Time budget per hash (ms)")
@click.option("--calibration", "-C", type=click.Choice(CALIBRATION_CHOICES), default=None,
              help="Calibration search policy")
@click.option("--selection", "-S", type=click.Choice(SELECTION_CHOICES), default=None,
              help="Selection ranking policy")
@click.option("--variant", type=click.Choice(VARIANT_CHOICES), default=None, help="Argon2 variant")
@click.pass_context
def tune(
    ctx: click.Context,
    budget: Optional[float],
    calibration: Optional[str],
    selection: Optional[str],
    variant: Optional[str],
) -> None:
    """
    Calibrate and print the best parameters as JSON.
    """
    tuner = Tuner(config=_config(ctx))

    try:
        params = tuner.get_max_parameters(budget, calibration, selection, variant)
    except TuningError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(params.to_dict(), indent=2))


@cli.command()
@click.option("--budget", "-b", type=BUDGET_RANGE, default=None, help="Time budget per hash (ms)")
@click.option("--policy", "-p", type=click.Choice(CALIBRATION_CHOICES), default=None,
              help="Calibration search policy")
@click.option("--variant", type=click.Choice(VARIANT_CHOICES), default=None, help="Argon2 variant")
@click.option("--output", "-o", default=None, type=click.Path(), help="Save series as JSON")
@click.option("--quiet", "-q", is_flag=True, help="Do not print each sample")
@click.pass_context
def calibrate(
    ctx: click.Context,
    budget: Optional[float],
    policy: Optional[str],
    variant: Optional[str],
    output: Optional[str],
    quiet: bool,
) -> None:
    """
    Run a calibration and optionally save the measured samples.
    """
    config = _config(ctx)
    tuner = Tuner(config=config)

    click.echo(click.style("\n═══ Calibration ═══", fg="cyan", bold=True))

    try:
        series = tuner.run_calibration(
            budget, policy, variant, on_sample=None if quiet else _echo_sample
        )
    except TuningError as e:
        raise click.ClickException(str(e))

    summary = series.summary()
    click.echo(
        f"\n{summary['count']} samples, {summary['min_ms']:.1f}-{summary['max_ms']:.1f} ms, "
        f"{series.accumulated_ms / 1000:.2f}s spent hashing"
    )

    if output:
        safe_json_dump(series.to_dict(), output)
        click.echo(f"\n✓ Series saved: {output}")


@cli.command()
@click.argument("series_path", type=click.Path(exists=True))
@click.option("--budget", "-b", type=BUDGET_RANGE, required=True, help="Time budget per hash (ms)")
@click.option("--policy", "-p", type=click.Choice(SELECTION_CHOICES), default="max_cost",
              help="Selection ranking policy")
def select(series_path: str, budget: float, policy: str) -> None:
    """
    Select parameters for a budget from a saved calibration series.
    """
    try:
        series = SampleSeries.load(Path(series_path))
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise click.ClickException(f"Cannot read series {series_path}: {e}")

    selector = get_selection_engine(policy)

    try:
        selector.initialize(series)
        report = describe_selection(selector, budget)
    except NoSampleWithinBudgetError as e:
        fastest = e.fastest.elapsed_ms if e.fastest else float("nan")
        raise click.ClickException(f"{e} Fastest sample took {fastest:.2f}ms.")
    except TuningError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(report, indent=2))


@cli.command()
@click.option("--variant", type=click.Choice(VARIANT_CHOICES), default=Variant.ARGON2ID.value,
              help="Argon2 variant")
def limits(variant: str) -> None:
    """
    Print default parameters and hard limits.
    """
    primitive = Argon2Primitive()
    data = {
        "defaults": primitive.default_parameters(Variant(variant)).to_dict(),
        "limits": primitive.limits().to_dict(),
    }
    click.echo(json.dumps(data, indent=2))


@cli.command()
def info() -> None:
    """
    Display the host capacity that bounds calibration.
    """
    try:
        argon2_version = version("argon2-cffi")
    except PackageNotFoundError:
        argon2_version = "unknown"

    resources = SystemResources.probe()
    space = Argon2Primitive().limits()
    ceiling = memory_ceiling_exponent(space.memory_cost, resources.available_memory_bytes)

    click.echo(click.style("\n═══ Argon2TheMax System Information ═══", fg="cyan", bold=True))
    click.echo(f"\nPython:      {platform.python_version()}")
    click.echo(f"Platform:    {platform.platform()}")
    click.echo(f"argon2-cffi: {argon2_version}")
    click.echo(f"\nCPUs:        {resources.cpus}")
    click.echo(f"Free memory: {format_size(resources.available_memory_bytes)}")
    click.echo(f"Parallelism: {default_parallelism(space.parallelism, resources.cpus)}")
    click.echo(f"Memory cap:  2^{ceiling} KiB ({format_size(2 ** ceiling * 1024)})")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
