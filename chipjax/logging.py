"""Console output for chipjax.

``ConsoleLogger`` is the leveled logger the machine and the command line
write through. ``frame_progress`` wraps a per-frame scan body so a jitted
headless run drives a tqdm bar through ``io_callback``.
"""

import sys
import time

import jax
from jax.experimental import io_callback
from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Prints ``[elapsed][LEVEL][name] message`` lines at or above ``log_level``.

    Colors are only used when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        if log_level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.name = name
        self.threshold = LEVELS.index(log_level.upper())
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS.index(level) >= self.threshold

    def log(self, level: str, message: str):
        if not self.is_enabled_for(level):
            return
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>7s}]"
        if self.use_colors:
            tag = f"{COLORS[level]}{tag}{RESET}"
        print(f"{stamp}{tag}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


def frame_progress(num_frames: int, desc: str, interval: int = 10):
    """Decorate a ``(state, frame_index) -> (state, output)`` scan body with a progress bar.

    The bar opens on frame 0, moves every ``interval`` frames and closes
    after the last frame.
    """
    bars = {}

    def _open():
        bars["frames"] = tqdm(total=num_frames, desc=desc, unit="frame")

    def _report(done):
        bar = bars["frames"]
        bar.n = int(done)
        bar.refresh()
        if bar.n == num_frames:
            bars.pop("frames").close()

    def decorator(frame_fn):
        def frame_with_progress(state, frame_index):
            jax.lax.cond(
                frame_index == 0,
                lambda _: io_callback(_open, None, ordered=True),
                lambda _: None,
                None,
            )
            result = frame_fn(state, frame_index)
            done = frame_index + 1
            jax.lax.cond(
                (done % interval == 0) | (done == num_frames),
                lambda d: io_callback(_report, None, d, ordered=True),
                lambda d: None,
                done,
            )
            return result
        return frame_with_progress

    return decorator
