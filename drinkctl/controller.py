"""Text stand-in for the user interface the controllers report to."""

from __future__ import annotations

import sys
from typing import Iterable, TextIO


class Controller:
    """Prints messages and drink lists; always confirms orders."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def print(self, text: str) -> None:
        print(text, file=self._out)

    def confirm_order(self) -> bool:
        return True

    def print_drinks(self, drinks: Iterable[str]) -> None:
        for drink in drinks:
            print(drink, file=self._out)