"""Append-only, date-named log files."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

_FULL_FORMAT = "%d/%m-%Y@%H:%M:%S"
_DATE_FORMAT = "%d%m%Y"


def format_time(when: datetime | None, full: bool) -> str:
    """Format a timestamp; ``full`` gives date and time, otherwise DDMMYYYY."""
    moment = when if when is not None else datetime.now()
    return moment.strftime(_FULL_FORMAT if full else _DATE_FORMAT)


class Logger:
    """Writes timestamped lines to a file named after the current date."""

    def __init__(
        self,
        directory: str | Path = ".",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self.path = Path(directory) / format_time(clock(), False)
        self._file = open(self.path, "a", encoding="utf-8")

    def log(self, message: str) -> None:
        """Append one line, prefixed with the current time, and flush it."""
        with self._lock:
            self._file.write(f"{format_time(self._clock(), True)}:\t{message}\n")
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()