"""The colon-separated text protocol spoken between admin client and server."""

from __future__ import annotations

import re
from enum import IntEnum

SEPARATOR = ":"
FIELD_COUNT = 100
PLACEHOLDER = "*"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class Command(IntEnum):
    CHECKNAMEDRINK = 0
    CHECKSTOCK = 1
    GETINGREDIENTSNAME = 3
    CREATEDRINK = 4
    GETDRINKSNAME = 5
    GETDRINK = 6
    CHANGEDRINK = 7
    DELETEDRINK = 8
    CHECKNAMEINGREDIENT = 9
    CHECKCONTAINER = 10
    CREATEINGREDIENT = 11
    GETINGREDIENTADDR = 12
    CHANGEINGREDIENTADDR = 13
    DELETEINGREDIENT = 14
    CLEAN = 15
    GETERROR = 16
    CLEAN_WATER = 17


def atoi(text: str) -> int:
    """Parse a leading integer the lenient way; 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def split_fields(message: str) -> list[str]:
    """Fields terminated by a separator; trailing unterminated text is dropped."""
    return message.split(SEPARATOR)[:-1]


def decode(message: str) -> list[str]:
    """Exactly FIELD_COUNT fields, padded with the placeholder."""
    fields = split_fields(message)[:FIELD_COUNT]
    return fields + [PLACEHOLDER] * (FIELD_COUNT - len(fields))


def parse_command(message: str) -> int:
    """The numeric command id at the start of a message."""
    return atoi(message.split(SEPARATOR, 1)[0])


def encode(command: int, *args: object) -> str:
    """Build a message: the command id and each argument, each followed by a separator."""
    parts = [str(int(command)), *(str(arg) for arg in args)]
    return SEPARATOR.join(parts) + SEPARATOR