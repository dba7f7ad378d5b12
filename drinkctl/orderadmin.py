"""Order handling: queue confirmed orders and pour them on the dispenser."""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Iterable

from drinkctl.database import DatabaseError, DrinkDatabase, error_text
from drinkctl.device import DeviceCommand, SpiDevice
from drinkctl.drink import Drink

_STOP = object()


class OrderAdmin:
    """Takes drink orders from the user interface and sends them to the device."""

    def __init__(
        self,
        controller: Any,
        db: DrinkDatabase,
        logger: Any = None,
        device_factory: Callable[[], SpiDevice] | None = None,
    ) -> None:
        self.controller = controller
        self.db = db
        self._logger = logger
        self._device_factory = device_factory if device_factory is not None else SpiDevice
        self._orders: queue.Queue[Any] = queue.Queue()
        self._worker: threading.Thread | None = None

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.log(message)

    def drink_names(self) -> list[str]:
        """Drink names and image paths, alternating."""
        try:
            listing = self.db.drink_listing()
        except DatabaseError as exc:
            self.controller.print("DB ERROR: " + error_text(exc.code))
            return []
        return [item for pair in listing for item in pair]

    def get_drink(self, name: str) -> Drink:
        """The named drink, or an undeclared drink when it cannot be read."""
        try:
            return self.db.get_drink(name)
        except DatabaseError as exc:
            self._log("DB ERROR: " + error_text(exc.code))
            return Drink()

    def order_drinks(self, drinks: Iterable[str]) -> None:
        """Queue an order once the user has confirmed it."""
        if self.controller.confirm_order():
            self._orders.put(list(drinks))
        else:
            self.controller.print("Order cancelled")

    def process(self, drinks: Iterable[str]) -> None:
        """Pour every drink of one order."""
        try:
            device = self._device_factory()
        except OSError as exc:
            self.controller.print(f"Device error: {exc}")
            return
        with device:
            for name in drinks:
                device.write_byte(DeviceCommand.ORDER)
                try:
                    drink = self.db.get_drink(name)
                    addresses = self.db.addresses(drink.name)
                    for addr, slot in zip(addresses, drink.content):
                        device.write_byte(addr)
                        device.write_byte(slot.amount)
                    self._log(f"Ingredient: {drink.name} has been written to PSoC")
                    self.controller.print(f"Drink {drink.name} Has been ordered")
                    self.db.save_order(drink.name)
                except DatabaseError as exc:
                    self.controller.print("DB ERROR: " + error_text(exc.code))

    def check_stock(self) -> dict[str, str]:
        """Ask the dispenser how much of each ingredient is left."""
        try:
            names = self.db.ingredient_names()
        except DatabaseError as exc:
            self._log("DB ERROR: " + error_text(exc.code))
            return {}
        with self._device_factory() as device:
            device.write_byte(DeviceCommand.STOCK)
            stock = {name: device.read_block() for name in names}
        return dict(sorted(stock.items()))

    def _run(self) -> None:
        while True:
            drinks = self._orders.get()
            if drinks is _STOP:
                return
            self.process(drinks)

    def start(self) -> None:
        """Start the worker that pours queued orders."""
        if self._worker is not None and self._worker.is_alive():
            return
        self._worker = threading.Thread(target=self._run, daemon=True)
        self._worker.start()

    def stop(self) -> None:
        """Finish the orders already queued, then stop the worker."""
        if self._worker is None:
            return
        self._orders.put(_STOP)
        self._worker.join()
        self._worker = None