"""Drink recipes as stored by the controller."""

from __future__ import annotations

from dataclasses import dataclass, field

NOT_DECLARED = "NOT_DECLARED"
DEFAULT_PATH = "STD/PATH/TO/TMP.png"
SLOTS = 5


@dataclass
class DrinkContent:
    """One ingredient slot of a drink: the ingredient name and its amount."""

    name: str = NOT_DECLARED
    amount: int = 0


def _empty_slots() -> list[DrinkContent]:
    return [DrinkContent() for _ in range(SLOTS)]


@dataclass
class Drink:
    """A drink recipe with a fixed number of ingredient slots."""

    name: str = NOT_DECLARED
    path: str = DEFAULT_PATH
    content: list[DrinkContent] = field(default_factory=_empty_slots)

    def __post_init__(self) -> None:
        slots = list(self.content)
        if len(slots) > SLOTS:
            raise ValueError(f"a drink holds at most {SLOTS} ingredients")
        slots.extend(DrinkContent() for _ in range(SLOTS - len(slots)))
        self.content = slots