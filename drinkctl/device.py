"""Block-oriented access to the dispenser's SPI character device."""

from __future__ import annotations

from enum import IntEnum
from typing import BinaryIO

DEFAULT_PATH = "/dev/spidev"
BLOCK_SIZE = 8


class DeviceCommand(IntEnum):
    """State bytes the dispenser firmware understands."""

    ORDER = 0x01
    STOCK = 0x02
    CLEAN = 0x03


class SpiDevice:
    """Writes single bytes and reads fixed-size text blocks from the device."""

    def __init__(self, path: str = DEFAULT_PATH, stream: BinaryIO | None = None) -> None:
        self._stream = stream if stream is not None else open(path, "r+b", buffering=0)

    def write_byte(self, value: int) -> None:
        """Send one byte (truncated to 8 bits), padded to a full block."""
        block = bytes([int(value) & 0xFF]).ljust(BLOCK_SIZE, b"\0")
        self._stream.write(block)
        self._stream.flush()

    def read_block(self) -> str:
        """Read one block and return its text up to the first NUL byte."""
        data = self._stream.read(BLOCK_SIZE) or b""
        return data.split(b"\0", 1)[0].decode("latin-1")

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "SpiDevice":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()