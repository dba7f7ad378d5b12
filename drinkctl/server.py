"""TCP server that hands admin protocol messages to an :class:`Admin`."""

from __future__ import annotations

import socket
import threading
from typing import Any

from drinkctl.database import DatabaseError, error_text

DEFAULT_PORT = 7913
BUFFER_SIZE = 512
BACKLOG = 5
EXIT_MESSAGE = "EXIT"


class Server:
    """Listens for admin clients and answers each message on its own thread."""

    def __init__(
        self,
        admin: Any,
        host: str = "",
        port: int = DEFAULT_PORT,
        logger: Any = None,
    ) -> None:
        self.admin = admin
        self._logger = logger
        self._closed = threading.Event()
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            self._socket.bind((host, port))
            self._socket.listen(BACKLOG)
        except OSError:
            self._log("Couldn't bind")
            self._socket.close()
            raise

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.log(message)

    @property
    def address(self) -> tuple[str, int]:
        """The (host, port) the server is listening on."""
        host, port = self._socket.getsockname()[:2]
        return host, port

    def serve_forever(self) -> None:
        """Accept clients until :meth:`shutdown` is called."""
        self._log("Server started, listening for incomming connections.")
        while not self._closed.is_set():
            try:
                conn, _ = self._socket.accept()
            except OSError:
                if self._closed.is_set():
                    return
                self._log("Couldn't accept incomming connection")
                raise
            threading.Thread(
                target=self._handle_connection, args=(conn,), daemon=True
            ).start()

    def _handle_connection(self, conn: socket.socket) -> None:
        self._log("Client connected, worker started.")
        with conn:
            while True:
                try:
                    data = conn.recv(BUFFER_SIZE)
                except OSError:
                    return
                if not data:
                    return
                text = data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
                if text == EXIT_MESSAGE:
                    return
                try:
                    reply = self.admin.handle(text)
                except DatabaseError as exc:
                    self._log("DB ERROR: " + error_text(exc.code))
                    continue
                if reply is not None:
                    try:
                        self.send(reply, conn)
                    except OSError:
                        return

    def send(self, text: str, conn: socket.socket) -> None:
        """Write a reply to a client connection."""
        try:
            conn.sendall(text.encode("utf-8"))
        except OSError:
            self._log("ERROR writing to socket")
            raise
        self._log("Server wrote: " + text)

    def shutdown(self) -> None:
        """Stop accepting clients and close the listening socket."""
        if self._closed.is_set():
            return
        self._closed.set()
        try:
            self._socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._socket.close()

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()