"""Administrative operations on the drink database, and the request handler for them."""

from __future__ import annotations

import time
from typing import Any, Callable

from drinkctl.database import DatabaseError, DrinkDatabase, Kind, error_text
from drinkctl.device import DeviceCommand, SpiDevice
from drinkctl.drink import SLOTS, Drink, DrinkContent
from drinkctl.protocol import SEPARATOR, Command, atoi, decode, parse_command

TRUE = "TRUE"
FALSE = "FALSE"
CLEAN_REPLY = "WATER"
CLEAN_WATER_REPLY = "ADD_NORMAL"
UNKNOWN_REPLY = "UNKNOWN COMMAND"

# Field index of the image path in a drink message: command, name, 5 slot pairs, path.
_PATH_FIELD = 2 + 2 * SLOTS


def _flag(value: bool) -> str:
    return TRUE if value else FALSE


def _drink_from_fields(fields: list[str]) -> Drink:
    content = [
        DrinkContent(fields[2 + 2 * slot], atoi(fields[3 + 2 * slot]))
        for slot in range(SLOTS)
    ]
    return Drink(name=fields[1], path=fields[_PATH_FIELD], content=content)


def _terminated(items: list[str]) -> str:
    return "".join(item + SEPARATOR for item in items)


class Admin:
    """Manages drinks and ingredients and answers admin protocol messages.

    Database failures are logged and reported through the return value,
    so that a client always gets an answer.
    """

    def __init__(
        self,
        db: DrinkDatabase,
        controller: Any = None,
        logger: Any = None,
        device_factory: Callable[[], SpiDevice] | None = None,
    ) -> None:
        self.db = db
        self.controller = controller
        self._logger = logger
        self._device_factory = device_factory if device_factory is not None else SpiDevice

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.log(message)

    def _db_error(self, exc: DatabaseError) -> None:
        self._log("DB ERROR: " + error_text(exc.code))

    def check_name_drink(self, name: str) -> bool:
        return self.db.has_name(Kind.DRINK, name)

    def check_stock(self) -> dict[str, str]:
        """Ask the dispenser how much of each ingredient is left."""
        try:
            names = self.db.ingredient_names()
        except DatabaseError as exc:
            self._db_error(exc)
            return {}
        stock: dict[str, str] = {}
        with self._device_factory() as device:
            device.write_byte(DeviceCommand.STOCK)
            for name in names:
                amount = device.read_block()
                stock[name] = amount
                self._log(f"DEBUG: Ingrediens: {name} Amt: {amount}")
        return dict(sorted(stock.items()))

    def ingredient_names(self) -> list[str]:
        try:
            return self.db.ingredient_names()
        except DatabaseError as exc:
            self._db_error(exc)
            return ["DB ERROR: " + error_text(exc.code)]

    def create_drink(self, drink: Drink) -> bool:
        try:
            self.db.create_drink(drink)
        except DatabaseError as exc:
            self._db_error(exc)
            return False
        return True

    def drink_names(self) -> list[str]:
        """Drink names and image paths, alternating."""
        try:
            listing = self.db.drink_listing()
        except DatabaseError as exc:
            self._db_error(exc)
            return []
        return [item for pair in listing for item in pair]

    def get_drink(self, name: str) -> Drink:
        """The named drink, or an undeclared drink when it cannot be read."""
        try:
            return self.db.get_drink(name)
        except DatabaseError as exc:
            self._db_error(exc)
            return Drink()

    def change_drink(self, drink: Drink) -> bool:
        try:
            self.db.change_drink(drink)
        except DatabaseError as exc:
            self._db_error(exc)
            return False
        return True

    def delete_drink(self, name: str) -> bool:
        try:
            self.db.remove(name, Kind.DRINK)
        except DatabaseError as exc:
            self._db_error(exc)
            return False
        self._log(f"The entry {name} has been deleted.")
        return True

    def check_name_ingredient(self, name: str) -> bool:
        return self.db.has_name(Kind.INGREDIENT, name)

    def check_container(self, addr: int) -> bool:
        """True when no ingredient occupies the container address."""
        return not self.db.container_in_use(addr)

    def create_ingredient(self, name: str, addr: int) -> bool:
        try:
            self.db.create_ingredient(name, addr)
        except DatabaseError as exc:
            self._db_error(exc)
            return False
        return True

    def ingredient_address(self, name: str) -> int:
        """Container address of an ingredient, 0 when it cannot be found."""
        try:
            return self.db.ingredient_address(name)
        except DatabaseError as exc:
            self._db_error(exc)
            return 0

    def change_ingredient_address(self, name: str, addr: int) -> bool:
        try:
            self.db.change_ingredient_address(name, addr)
        except DatabaseError as exc:
            self._db_error(exc)
            return False
        return True

    def delete_ingredient(self, name: str) -> bool:
        try:
            if self.db.in_use(name):
                self._log("DB ERROR: ingredient " + name + " is in use")
                return False
            self.db.remove(name, Kind.INGREDIENT)
        except DatabaseError as exc:
            self._db_error(exc)
            return False
        return True

    def _run_clean(self, label: str, waiting: str) -> None:
        with self._device_factory() as device:
            self._log("SPI Device opened")
            try:
                device.write_byte(DeviceCommand.CLEAN)
            except OSError:
                self._log("Write to SPIDEV error")
                return
            self._log(f"Write to PSoC: {label}")
            while True:
                try:
                    device.read_block()
                    return
                except OSError:
                    self._log(waiting)
                    time.sleep(1)

    def clean(self) -> None:
        """Run the dispenser's cleaning cycle and wait for it to finish."""
        self._run_clean("Clean", "Waiting for PSoC clean")

    def clean_water(self) -> None:
        """Run the water rinse cycle and wait for it to finish."""
        self._run_clean("Clean Water", "Waiting for PSoC clean #2")

    def handle(self, message: str) -> str | None:
        """Answer one protocol message; None when the command has no reply."""
        self._log("Parser recieved: " + message)
        command = parse_command(message)
        self._log(f"Command found: {command}")
        fields = decode(message)

        if command == Command.CHECKNAMEDRINK:
            return _flag(self.check_name_drink(fields[1]))
        if command == Command.CHECKSTOCK:
            stock = self.check_stock()
            return _terminated([item for pair in stock.items() for item in pair])
        if command == Command.GETINGREDIENTSNAME:
            return _terminated(self.ingredient_names())
        if command == Command.CREATEDRINK:
            return _flag(self.create_drink(_drink_from_fields(fields)))
        if command == Command.GETDRINKSNAME:
            return _terminated(self.drink_names())
        if command == Command.GETDRINK:
            drink = self.get_drink(fields[1])
            items = [drink.name]
            for slot in drink.content:
                items.extend((slot.name, str(slot.amount)))
            items.append(drink.path)
            return _terminated(items)
        if command == Command.CHANGEDRINK:
            self.change_drink(_drink_from_fields(fields))
            return None
        if command == Command.DELETEDRINK:
            return _flag(self.delete_drink(fields[1]))
        if command == Command.CHECKNAMEINGREDIENT:
            return _flag(self.check_name_ingredient(fields[1]))
        if command == Command.CHECKCONTAINER:
            return _flag(self.check_container(atoi(fields[1])))
        if command == Command.CREATEINGREDIENT:
            self.create_ingredient(fields[1], atoi(fields[2]))
            return None
        if command == Command.GETINGREDIENTADDR:
            return str(self.ingredient_address(fields[1]))
        if command == Command.CHANGEINGREDIENTADDR:
            return _flag(self.change_ingredient_address(fields[1], atoi(fields[2])))
        if command == Command.DELETEINGREDIENT:
            return _flag(self.delete_ingredient(fields[1]))
        if command == Command.CLEAN:
            self.clean()
            return CLEAN_REPLY
        if command == Command.CLEAN_WATER:
            self.clean_water()
            return CLEAN_WATER_REPLY
        return UNKNOWN_REPLY