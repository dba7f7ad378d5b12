"""A stand-in server that prints whatever clients send it."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import TextIO

from drinkctl.server import BACKLOG, DEFAULT_PORT, EXIT_MESSAGE

READ_SIZE = 255


def run_responder(listener: socket.socket, output: TextIO) -> int:
    """Print one message per client until a client sends EXIT.

    Returns the number of messages printed.
    """
    listener.listen(BACKLOG)
    print("Server will start listening now..", file=output)
    count = 0
    while True:
        conn, _ = listener.accept()
        with conn:
            data = conn.recv(READ_SIZE)
        text = data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        if text == EXIT_MESSAGE:
            return count
        print(f"I got: {text}", file=output)
        count += 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print messages sent by clients.")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            listener.bind((args.host, args.port))
        except OSError:
            print("Error: Couldn't bind", file=sys.stderr)
            return 1
        run_responder(listener, sys.stdout)
    return 0