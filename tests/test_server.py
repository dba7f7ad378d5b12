import socket
import threading

import pytest

from drinkctl.admin import UNKNOWN_REPLY, Admin
from drinkctl.database import DrinkDatabase
from drinkctl.server import Server


@pytest.fixture
def running():
    db = DrinkDatabase()
    db.create_schema()
    db.create_ingredient("Rom", 5)
    server = Server(Admin(db), host="127.0.0.1", port=0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    thread.join(timeout=5)
    db.close()


def _exchange(server, message):
    with socket.create_connection(server.address, timeout=5) as conn:
        conn.sendall(message.encode())
        return conn.recv(512).decode()


def test_check_ingredient_true(running):
    assert _exchange(running, "9:Rom:") == "TRUE"


def test_check_ingredient_false(running):
    assert _exchange(running, "9:Gin:") == "FALSE"


def test_ingredient_address(running):
    assert _exchange(running, "12:Rom:") == "5"


def test_unknown_command(running):
    assert _exchange(running, "99:") == UNKNOWN_REPLY


def test_several_requests_on_one_connection(running):
    with socket.create_connection(running.address, timeout=5) as conn:
        conn.sendall(b"9:Rom:")
        first = conn.recv(512).decode()
        conn.sendall(b"9:Vodka:")
        second = conn.recv(512).decode()
    assert (first, second) == ("TRUE", "FALSE")


def test_exit_closes_connection(running):
    with socket.create_connection(running.address, timeout=5) as conn:
        conn.sendall(b"EXIT")
        assert conn.recv(512) == b""


def test_shutdown_stops_serving():
    db = DrinkDatabase()
    server = Server(Admin(db), host="127.0.0.1", port=0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    server.shutdown()
    thread.join(timeout=5)
    assert not thread.is_alive()
    db.close()


def test_bind_failure_raises():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        with pytest.raises(OSError):
            Server(Admin(DrinkDatabase()), host="127.0.0.1", port=port)