"""
Rich live panel for tracking definition lookups.

Shows completed/total lookups, definitions found, elapsed time, rate and an
estimate of the time remaining, redrawn in place instead of scrolling.
"""

import time
from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class ProgressDisplay:
    """
    Context manager for a live-updating lookup counter.

    Usage:
        with ProgressDisplay("Looking up definitions", total=len(words)) as progress:
            for future in as_completed(futures):
                progress.advance(found=future.result() is not None)

    With enabled=False nothing is drawn but the counters still work.
    """

    def __init__(
        self,
        title: str = "Progress",
        total: Optional[int] = None,
        refresh_per_second: int = 4,
        update_interval: int = 100,
        enabled: bool = True,
        console: Optional[Console] = None,
    ):
        self.title = title
        self.total = total
        self.refresh_per_second = refresh_per_second
        self.update_interval = max(1, update_interval)
        self.enabled = enabled
        self.console = console

        self.completed = 0
        self.found = 0
        self.start_time: float = 0.0
        self.live: Optional[Live] = None

    def __enter__(self):
        self.start_time = time.monotonic()
        if self.enabled:
            self.live = Live(
                self._make_panel(),
                refresh_per_second=self.refresh_per_second,
                console=self.console,
                transient=False,
            )
            self.live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.live:
            self.live.update(self._make_panel())
            self.live.__exit__(exc_type, exc_val, exc_tb)
            self.live = None
        return False

    def advance(self, found: bool = False):
        """Count one finished lookup."""
        self.completed += 1
        if found:
            self.found += 1

        # Redraw every N lookups, and always on the last one
        if self.live and (
            self.completed % self.update_interval == 0 or self.completed == self.total
        ):
            self.live.update(self._make_panel())

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time if self.start_time else 0.0

    def metrics(self) -> Dict[str, Any]:
        elapsed = self.elapsed
        data: Dict[str, Any] = {
            "Completed": self.completed if self.total is None else f"{self.completed:,}/{self.total:,}",
            "Defined": self.found,
            "Elapsed": elapsed,
        }
        if elapsed > 0 and self.completed:
            rate = self.completed / elapsed
            data["Rate"] = rate
            if self.total:
                data["Remaining"] = max(self.total - self.completed, 0) / rate
        return data

    def _make_panel(self) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(justify="left", no_wrap=True)
        grid.add_column(justify="right", no_wrap=True)

        for key, value in self.metrics().items():
            grid.add_row(
                Text(f"{key}:", style="bold grey50"),
                Text(self._format_value(key, value), style="bright_cyan"),
            )

        return Panel(grid, title=self.title, box=box.SIMPLE, border_style="bright_black")

    @staticmethod
    def _format_value(key: str, value: Any) -> str:
        if isinstance(value, float):
            if key in ("Elapsed", "Remaining"):
                minutes, seconds = divmod(int(value), 60)
                hours, minutes = divmod(minutes, 60)
                if hours:
                    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
                return f"{minutes:02d}:{seconds:02d}"
            if key == "Rate":
                return f"{value:,.1f}/s"
            return f"{value:,.2f}"
        if isinstance(value, int):
            return f"{value:,}"
        return str(value)
