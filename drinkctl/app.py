"""The drink controller: admin server and order handling over one database."""

from __future__ import annotations

import argparse
import contextlib
import functools
import sys
import threading

from drinkctl.admin import Admin
from drinkctl.controller import Controller
from drinkctl.database import DatabaseError, DrinkDatabase
from drinkctl.device import DEFAULT_PATH as DEFAULT_DEVICE
from drinkctl.device import SpiDevice
from drinkctl.log import Logger
from drinkctl.orderadmin import OrderAdmin
from drinkctl.server import DEFAULT_PORT, Server

DEFAULT_DATABASE = "/home/root/drinksdatabase.db"
DEFAULT_LOG_DIR = "/home/root"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drinkctl", description="Run the drink dispenser controller."
    )
    parser.add_argument("--database", default=DEFAULT_DATABASE)
    parser.add_argument("--log-dir", default=DEFAULT_LOG_DIR)
    parser.add_argument("--device", default=DEFAULT_DEVICE)
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    with contextlib.ExitStack() as stack:
        logger = stack.enter_context(Logger(args.log_dir))
        try:
            db = DrinkDatabase(args.database, logger)
        except DatabaseError as exc:
            print(f"database error: {exc}", file=sys.stderr)
            return 1
        stack.enter_context(db)
        db.create_schema()

        print("**** FakeGUI Testfile ****\n")
        controller = Controller()
        device_factory = functools.partial(SpiDevice, args.device)

        admin = Admin(db, controller, logger, device_factory)
        try:
            server = Server(admin, args.host, args.port, logger)
        except OSError as exc:
            print(f"cannot listen on port {args.port}: {exc}", file=sys.stderr)
            return 1
        stack.callback(server.shutdown)

        print("[+] Starting thread for Admin-control")
        admin_thread = threading.Thread(target=server.serve_forever, daemon=True)
        admin_thread.start()

        orders = OrderAdmin(controller, db, logger, device_factory)
        orders.start()
        stack.callback(orders.stop)

        try:
            admin_thread.join()
        except KeyboardInterrupt:
            pass
    return 0