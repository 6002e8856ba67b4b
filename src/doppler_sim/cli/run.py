"""Command-line tool for running Doppler simulations headless.

The doppler-sim CLI runs the simulation engine with progress tracking and
optional HDF5 trace output. Parameter changes that a user would make with
the speed and frequency controls can be scheduled up front with ``--set``.
"""

import sys
import time
import warnings
from pathlib import Path

import click
from rich.console import Console

from doppler_sim import __version__
from doppler_sim.analysis import expected_observed_frequency
from doppler_sim.config import EngineConfig, load_config
from doppler_sim.core.engine import ParameterChange, ScheduledChange, SimulationEngine
from doppler_sim.core.pacer import RealTimePacer

from .progress import SimulationProgress, format_time, print_run_info

console = Console()


def parse_change(text: str) -> ScheduledChange:
    """Parse a scheduled change of the form ``TIME:PARAM=VALUE``.

    Args:
        text: e.g. "2.5:speed=120" or "4:frequency=2"

    Returns:
        The parsed ScheduledChange

    Raises:
        ValueError: If the text is malformed
    """
    try:
        when, assignment = text.split(":", 1)
        parameter, value = assignment.split("=", 1)
        change = ParameterChange(parameter.strip().lower(), float(value))
        scheduled = ScheduledChange(time=float(when), change=change)
    except ValueError as e:
        raise ValueError(
            f"Invalid change '{text}': expected TIME:PARAM=VALUE with PARAM "
            f"'speed' or 'frequency' ({e})"
        ) from e

    if scheduled.time < 0:
        raise ValueError(f"Invalid change '{text}': time must be non-negative")
    return scheduled


def _parse_changes(ctx, param, values) -> list[ScheduledChange]:
    try:
        return [parse_change(value) for value in values]
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.command()
@click.option("--speed", "-s", type=float, default=0.0, show_default=True, help="Source speed in m/s")
@click.option(
    "--frequency", "-f", type=float, default=1.0, show_default=True, help="Source frequency in Hz"
)
@click.option(
    "--duration", "-d", type=float, default=10.0, show_default=True, help="Simulated time in seconds"
)
@click.option(
    "--realtime/--no-realtime",
    default=False,
    help="Pace ticks to wall-clock time (default: run as fast as possible)",
)
@click.option(
    "--set",
    "schedule",
    multiple=True,
    metavar="TIME:PARAM=VALUE",
    callback=_parse_changes,
    help="Schedule a parameter change, e.g. --set 2.5:speed=120 (repeatable)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with engine config overrides",
)
@click.option("--output", "-o", type=click.Path(path_type=Path), help="HDF5 trace output path")
@click.option(
    "--snapshot-interval",
    type=click.IntRange(min=1),
    help="Save wavefront ring geometry every N ticks to the trace",
)
@click.option("--live", is_flag=True, help="Show the status readout while running")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output with debug info")
@click.option("--dry-run", is_flag=True, help="Validate parameters without running")
@click.version_option(version=__version__, prog_name="doppler-sim")
@click.pass_context
def main(
    ctx: click.Context,
    speed: float,
    frequency: float,
    duration: float,
    realtime: bool,
    schedule: list[ScheduledChange],
    config_path: Path | None,
    output: Path | None,
    snapshot_interval: int | None,
    live: bool,
    verbose: bool,
    dry_run: bool,
):
    """Run a 1-D Doppler effect simulation.

    A source oscillates along x between the observer margin and the far edge
    of the simulation space, emitting a wavefront every period. The observer
    measures the frequency it hears from the spacing of arriving wavefronts.

    Example:

    \b
        doppler-sim --speed 120 --frequency 2 --duration 20
        doppler-sim -f 1 --set 5:speed=200 --set 10:frequency=0.5 -o trace.h5
    """
    ctx.exit(
        _run(
            speed=speed,
            frequency=frequency,
            duration=duration,
            realtime=realtime,
            schedule=schedule,
            config_path=config_path,
            output=output,
            snapshot_interval=snapshot_interval,
            live=live,
            verbose=verbose,
            dry_run=dry_run,
        )
    )


def _run(
    speed: float,
    frequency: float,
    duration: float,
    realtime: bool,
    schedule: list[ScheduledChange],
    config_path: Path | None,
    output: Path | None,
    snapshot_interval: int | None,
    live: bool,
    verbose: bool,
    dry_run: bool,
) -> int:
    try:
        console.print("\n[bold]Doppler Simulation[/bold]", style="blue")
        console.print("─" * 60)

        # Load configuration
        try:
            config = load_config(config_path) if config_path else EngineConfig()
        except (FileNotFoundError, ValueError) as e:
            console.print(f"\n[bold red]Config Error:[/bold red] {e}")
            return 1

        if verbose and config_path:
            console.print(f"Config loaded from: {config_path}")

        if duration <= 0:
            console.print(f"\n[bold red]Error:[/bold red] duration must be positive, got {duration}")
            return 1

        # Build engine, surfacing quantization warnings on the console
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                engine = SimulationEngine(config, speed=speed, frequency=frequency)
            except ValueError as e:
                console.print(f"\n[bold red]Error:[/bold red] {e}")
                return 1
        for warning in caught:
            console.print(f"[yellow]Warning:[/yellow] {warning.message}")

        num_ticks = int(round(duration / config.dt))
        print_run_info(console, engine, num_ticks, realtime, output, schedule)

        if dry_run:
            console.print("[yellow]Dry run - simulation not executed[/yellow]")
            return 0

        pacer = RealTimePacer(config.dt, realtime=realtime)
        start_time = time.time()
        progress = SimulationProgress(console, engine, num_ticks, live=live)

        try:
            stats = engine.run(
                num_ticks=num_ticks,
                pacer=pacer,
                callback=progress.update,
                schedule=schedule,
                output_file=output,
                snapshot_interval=snapshot_interval,
            )
        except KeyboardInterrupt:
            progress.finish()
            console.print("\n[yellow]Interrupted by user[/yellow]")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            progress.finish()
            console.print(f"\n[bold red]Simulation Error:[/bold red] {e}")
            if verbose:
                console.print_exception()
            return 1
        finally:
            progress.finish()

        runtime = time.time() - start_time
        snapshot = engine.snapshot()

        # Success summary
        console.print("─" * 60)
        console.print("✓ [bold green]Simulation complete![/bold green]")
        console.print(f"  Simulated: {snapshot.time:.2f} s in {format_time(runtime)}")
        console.print(f"  Detections: {stats.detections}")

        if stats.overloaded_ticks:
            console.print(
                f"  [yellow]Overloaded ticks:[/yellow] {stats.overloaded_ticks} of {stats.ticks}"
            )
        else:
            console.print(f"  Overloaded ticks: 0 of {stats.ticks}")

        console.print(f"  Source frequency: {snapshot.source_frequency:.2f} Hz")
        console.print(f"  Observed frequency: {snapshot.observed_frequency:.2f} Hz")
        if snapshot.source_frequency > 0:
            expected = expected_observed_frequency(
                snapshot.source_frequency, snapshot.source_velocity, config.c, config.crossing
            )
            console.print(f"  Closed-form frequency at current velocity: {expected:.2f} Hz")

        if output is not None:
            if output.exists():
                console.print(f"  Output: {output} ({output.stat().st_size / 1e3:.1f} kB)")
            else:
                console.print(f"  Output: {output}")

        if verbose:
            console.print("\n[dim]Traces can be inspected with h5py or HDFView[/dim]")

        return 0

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
