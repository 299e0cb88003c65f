"""A terminal spinner drawn from a background thread."""

from __future__ import annotations

import itertools
import sys
import threading

FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
_CLEAR_LINE = "\r\x1b[K"


def _write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


class Spinner:
    """Animated spinner with a message; ``interval`` is in seconds."""

    def __init__(self, interval: float, message: str) -> None:
        self._interval = interval
        self._message = message
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def message(self) -> str:
        with self._lock:
            return self._message

    def set_message(self, message: str) -> None:
        """Change the message shown next to the spinner."""
        with self._lock:
            self._message = message

    def start(self) -> None:
        """Start drawing frames in a background thread."""
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), daemon=True
        )
        self._thread.start()

    def _run(self, stop_event: threading.Event) -> None:
        for frame in itertools.cycle(FRAMES):
            if stop_event.is_set():
                break
            _write(f"\r{frame} {self.message}")
            stop_event.wait(self._interval)
        _write(_CLEAR_LINE)

    def stop(self, final_message: str | None = None) -> None:
        """Stop the spinner, clear its line and optionally print a final message."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if final_message is not None:
            _write(f"{_CLEAR_LINE}{final_message}\n")
        else:
            _write(_CLEAR_LINE)

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()