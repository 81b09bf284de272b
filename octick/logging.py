"""Console logging and step callbacks.

The scheduler reports every step to a list of callbacks. `TraceCallback`
prints an execution trace, `StatsCallback` keeps an opcode histogram and
`run_with_progress` drives a system under a tqdm progress bar.
"""

import sys
import time
from collections import Counter
from typing import Any, Dict, Optional

from tqdm import tqdm

from octick.events import StepStatus


class ConsoleLogger:
    """Console logger with level filtering, colors and timestamps."""

    LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(
        self,
        name: str = "Octick",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.stream = stream or sys.stdout
        self.log_level = log_level.upper()
        if self.log_level not in self.LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(self.LEVELS)}")
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = {
            "DEBUG": "\033[36m",
            "INFO": "\033[32m",
            "WARNING": "\033[33m",
            "ERROR": "\033[31m",
            "CRITICAL": "\033[35m",
            "RESET": "\033[0m",
        }

    def _should_log(self, level: str) -> bool:
        return self.LEVELS.index(level) >= self.LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{self.colors[level]}{level_str}{self.colors['RESET']}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self._should_log(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class StepCallback:
    """Base class for step observers."""

    def on_step(self, event, state):
        """Called after every tick with its StepEvent and resulting state."""
        pass


class TraceCallback(StepCallback):
    """Logs one DEBUG line per step."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger(log_level="DEBUG")

    def on_step(self, event, state):
        instruction = str(event.instruction) if event.instruction is not None else "-"
        message = (
            f"{event.pc:03X}  {instruction:<18s} {event.status.value:<8s} "
            f"I={int(state.I):03X} V=[{' '.join(f'{int(v):02X}' for v in state.V)}]"
        )
        if event.error is not None:
            message += f" ! {event.error.message}"
        self.logger.debug(message)


class StatsCallback(StepCallback):
    """Counts completed opcodes, wait polls and failures."""

    def __init__(self):
        self.opcodes = Counter()
        self.statuses = Counter()
        self.steps = 0

    def on_step(self, event, state):
        self.steps += 1
        self.statuses[event.status.value] += 1
        if event.status in (StepStatus.EXECUTED, StepStatus.RESUMED):
            self.opcodes[event.instruction.op.name] += 1

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "steps": self.steps,
            "statuses": dict(self.statuses),
            "top_opcodes": self.opcodes.most_common(5),
        }


def run_with_progress(system, num_ticks: int, elapsed_ms: float, desc: str = None) -> int:
    """Tick `system` up to `num_ticks` times under a progress bar.

    Stops early once the machine halts. Returns the number of ticks run.
    """
    ticks = 0
    with tqdm(total=num_ticks, desc=desc or "Running", unit="tick", leave=False) as bar:
        while ticks < num_ticks and not system.halted:
            system.tick(elapsed_ms)
            ticks += 1
            bar.update(1)
    return ticks
