from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from rich.console import Console
from rich.table import Table


@dataclass
class TimerRecord:
    name: str
    seconds: float


class RunLogger:
    """Collects warnings and timings emitted while a program runs."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = True) -> None:
        self.console = console or Console()
        self.verbose = verbose
        self.warnings: List[str] = []
        self.timers: Dict[str, TimerRecord] = {}

    def info(self, message: str) -> None:
        if self.verbose:
            self.console.log(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self.console.print(f"[yellow]Warning:[/yellow] {message}", highlight=False)

    def section(self, title: str) -> None:
        if self.verbose:
            self.console.rule(f"[bold green]{title}")

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.timers[name] = TimerRecord(name=name, seconds=elapsed)
            self.info(f"{name} took {elapsed:.3f}s")

    def summary(self) -> None:
        table = Table(title="Timers", show_edge=False, header_style="bold white")
        table.add_column("timer")
        table.add_column("seconds")
        for record in self.timers.values():
            table.add_row(record.name, f"{record.seconds:.4f}")
        self.console.print(table)
