"""Progress display for Doppler simulation runs.

Provides rich terminal UI for run tracking including:
- Progress bar with percentage, elapsed time and ETA
- Tick rate, overload count and current observed frequency
- Memory usage
- Optional live status panel (readout text with blinking status lamp)
"""

import time
from typing import TYPE_CHECKING

import psutil
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from doppler_sim.render import LAMP_OFF, LAMP_OK, LAMP_OVERLOAD, FrameBuilder

if TYPE_CHECKING:
    from doppler_sim.core.engine import ScheduledChange, SimulationEngine

# Rich border styles for the status lamp
LAMP_STYLES = {LAMP_OFF: "bright_black", LAMP_OK: "green", LAMP_OVERLOAD: "red"}


def format_time(seconds: float) -> str:
    """Format time duration for display.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "1m 23s" or "2h 15m"
    """
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs:02d}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes:02d}m"


class SimulationProgress:
    """Real-time progress display for simulation runs.

    Pass :meth:`update` as the engine's run callback. With ``live=True`` a
    frame is built on every tick, so the readout and lamp blink phase track
    the simulation exactly while the screen itself refreshes at most every
    ``update_interval`` seconds.

    Example:
        >>> progress = SimulationProgress(console, engine, num_ticks)
        >>> engine.run(num_ticks=num_ticks, callback=progress.update)
        >>> progress.finish()
    """

    def __init__(
        self,
        console: Console,
        engine: "SimulationEngine",
        num_ticks: int,
        update_interval: float = 0.1,
        live: bool = False,
    ):
        """Initialize progress display.

        Args:
            console: Rich console instance
            engine: Engine being run
            num_ticks: Total number of ticks
            update_interval: Minimum time between screen updates (seconds)
            live: If True, show the status panel above the progress bar
        """
        self.console = console
        self.engine = engine
        self.num_ticks = num_ticks
        self.update_interval = update_interval

        self.start_time = time.time()
        self.last_update = 0.0
        self.peak_memory = 0.0
        self.overloaded_ticks = 0
        self.frame = None
        self._finished = False

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            TextColumn("•"),
            TimeRemainingColumn(),
            TextColumn("[dim]{task.fields[stats]}"),
            console=console,
        )
        self.task = self.progress.add_task("Simulating", total=num_ticks, stats="")

        if live:
            self._builder = FrameBuilder(c=engine.config.c)
            self._live = Live(self._renderable(), console=console, refresh_per_second=10)
            self._live.start()
        else:
            self._builder = None
            self._live = None
            self.progress.start()

    def _renderable(self):
        if self.frame is None:
            return self.progress
        panel = Panel(
            self.frame.readout,
            title="Doppler Sim",
            border_style=LAMP_STYLES[self.frame.lamp],
            expand=False,
        )
        return Group(panel, self.progress)

    def update(self, step: int):
        """Update progress display after a tick.

        Args:
            step: Tick index within the run (0-indexed)
        """
        # Timing of the previous tick; this one is timed after the callback
        timing = self.engine.last_timing
        if step > 0 and timing is not None and timing.overloaded:
            self.overloaded_ticks += 1

        if self._builder is not None:
            self.frame = self._builder.build(self.engine.snapshot())

        current_time = time.time()
        is_last = step + 1 >= self.num_ticks

        # Rate limit screen updates
        if current_time - self.last_update < self.update_interval and not is_last:
            return

        elapsed = current_time - self.start_time
        ticks_completed = step + 1
        tick_rate = ticks_completed / elapsed if elapsed > 0 else 0.0

        memory_mb = psutil.Process().memory_info().rss / (1024**2)
        self.peak_memory = max(self.peak_memory, memory_mb)

        stats_parts = [
            f"{tick_rate:.0f} ticks/s",
            f"overloaded: {self.overloaded_ticks}",
            f"obs: {self.engine.observed_frequency:.2f} Hz",
            f"mem: {memory_mb:.0f} MB",
        ]
        self.progress.update(self.task, completed=ticks_completed, stats=" | ".join(stats_parts))

        if self._live is not None:
            self._live.update(self._renderable())

        self.last_update = current_time

    def finish(self):
        """Finalize progress display."""
        if self._finished:
            return
        self._finished = True

        if self._live is not None:
            self._live.stop()
        else:
            self.progress.stop()

        self.console.print()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()


def print_run_info(
    console: Console,
    engine: "SimulationEngine",
    num_ticks: int,
    realtime: bool,
    output_path=None,
    schedule: "list[ScheduledChange] | None" = None,
):
    """Print run parameters before starting.

    Args:
        console: Rich console instance
        engine: Configured engine
        num_ticks: Number of ticks to run
        realtime: Whether ticks are paced to wall-clock time
        output_path: Path to trace file (optional)
        schedule: Scheduled parameter changes (optional)
    """
    cfg = engine.config
    source = engine.source

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Timestep", f"{cfg.dt:.3f} s")
    table.add_row("Duration", f"{num_ticks} ticks ({num_ticks * cfg.dt:.2f} s)")
    table.add_row("Wave speed", f"{cfg.c:.0f} m/s")
    table.add_row(
        "Source speed", f"{abs(source.velocity):.2f} m/s (Mach {engine.mach_number:.2f})"
    )
    if source.silent:
        table.add_row("Source frequency", "silent")
    else:
        table.add_row(
            "Source frequency", f"{source.frequency:.2f} Hz (period {source.period:.2f} s)"
        )
    table.add_row(
        "Observer", f"({engine.observer.x:.0f}, {engine.observer.y:.0f}) m, {cfg.crossing}"
    )
    table.add_row("Ring capacity", str(cfg.capacity))
    table.add_row("Pacing", "real time" if realtime else "free running")
    if schedule:
        table.add_row("Scheduled changes", str(len(schedule)))
    if output_path is not None:
        table.add_row("Output", str(output_path))

    console.print(table)
    console.print()
