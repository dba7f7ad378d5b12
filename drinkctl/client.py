"""Client side of the admin protocol: a socket client and typed admin requests."""

from __future__ import annotations

import socket
from typing import Any

from drinkctl.admin import TRUE
from drinkctl.drink import SLOTS, Drink, DrinkContent
from drinkctl.protocol import Command, atoi, decode, encode, split_fields
from drinkctl.server import DEFAULT_PORT

DEFAULT_HOST = "10.9.8.2"
BUFFER_SIZE = 2048


class Client:
    """Sends each message on a fresh connection and reads the reply from it."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock: socket.socket | None = None

    def send(self, data: str) -> None:
        """Open a new connection to the server and write ``data`` on it."""
        self.close()
        sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        try:
            sock.sendall(data.encode("utf-8"))
        except OSError:
            sock.close()
            raise
        self._sock = sock

    def receive(self) -> str:
        """Read one reply from the connection opened by the last :meth:`send`."""
        if self._sock is None:
            raise ConnectionError("nothing has been sent; no connection to read from")
        data = self._sock.recv(BUFFER_SIZE)
        return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _drink_message(command: Command, drink: Drink) -> str:
    items: list[object] = [drink.name]
    for slot in drink.content:
        items.extend((slot.name, slot.amount))
    items.append(drink.path)
    return encode(command, *items)


class AdminClient:
    """Remote administration of the drink controller over the admin protocol."""

    def __init__(self, controller: Any = None, client: Client | None = None) -> None:
        self.controller = controller
        self.client = client if client is not None else Client()

    def _request(self, message: str) -> str:
        self.client.send(message)
        return self.client.receive()

    def _ask(self, message: str) -> bool:
        return self._request(message) == TRUE

    def _report(self, text: str) -> None:
        if self.controller is not None:
            self.controller.print(text)

    def change_drink(self, drink: Drink) -> None:
        """Replace the stored drink of the same name; the server sends no reply."""
        self.client.send(_drink_message(Command.CHANGEDRINK, drink))

    def clean(self) -> str:
        """Start the cleaning cycle and report the server's answer."""
        reply = self._request(encode(Command.CLEAN))
        self._report(reply)
        return reply

    def clean_water(self) -> str:
        """Start the water rinse and report the server's answer."""
        reply = self._request(encode(Command.CLEAN_WATER))
        self._report(reply)
        return reply

    def ingredient_names(self) -> list[str]:
        return split_fields(self._request(str(int(Command.GETINGREDIENTSNAME))))

    def delete_drink(self, name: str) -> bool:
        return self._ask(encode(Command.DELETEDRINK, name))

    def check_name_ingredient(self, name: str) -> bool:
        return self._ask(encode(Command.CHECKNAMEINGREDIENT, name))

    def check_container(self, addr: int) -> bool:
        """True when the container address is free."""
        return self._ask(encode(Command.CHECKCONTAINER, int(addr)))

    def change_ingredient_address(self, name: str, addr: int) -> bool:
        return self._ask(encode(Command.CHANGEINGREDIENTADDR, name, int(addr)))

    def delete_ingredient(self, name: str) -> bool:
        return self._ask(encode(Command.DELETEINGREDIENT, name))

    def create_ingredient(self, name: str, addr: int) -> None:
        """Register an ingredient; the server sends no reply."""
        self.client.send(encode(Command.CREATEINGREDIENT, name, int(addr)))

    def ingredient_address(self, name: str) -> int:
        return atoi(self._request(encode(Command.GETINGREDIENTADDR, name)))

    def check_name_drink(self, name: str) -> bool:
        return self._ask(encode(Command.CHECKNAMEDRINK, name))

    def create_drink(self, drink: Drink) -> None:
        """Store a new drink; the server's answer is not read."""
        self.client.send(_drink_message(Command.CREATEDRINK, drink))

    def error_text(self, code: int) -> str:
        return self._request(encode(Command.GETERROR, int(code)))

    def drink_names(self) -> list[str]:
        """Drink names and image paths, alternating, as the server lists them."""
        return split_fields(self._request(str(int(Command.GETDRINKSNAME))))

    def check_stock(self) -> dict[str, str]:
        """Remaining amount of each ingredient, keyed and ordered by name."""
        fields = iter(split_fields(self._request(str(int(Command.CHECKSTOCK)))))
        return dict(sorted(zip(fields, fields)))

    def get_drink(self, name: str) -> Drink:
        fields = decode(self._request(encode(Command.GETDRINK, name)))
        content = [
            DrinkContent(fields[1 + 2 * slot], atoi(fields[2 + 2 * slot]))
            for slot in range(SLOTS)
        ]
        return Drink(name=fields[0], path=fields[1 + 2 * SLOTS], content=content)