"""SQLite storage for drinks, ingredients and orders."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, Iterable

from drinkctl.drink import SLOTS, Drink, DrinkContent
from drinkctl.log import format_time
from drinkctl.protocol import atoi


class ErrorCode(IntEnum):
    NO_ERRORS = 0
    DB_FAILED_TO_OPEN = 1
    DB_QUERY_FAIL = 2
    DB_INGREDIENS_NOT_FOUND = 3
    UNDEFINED_PARAMETER = 4
    DB_ENTRY_ALREADY_EXIST = 5
    DB_DRINK_NOT_FOUND = 6
    DB_INGREDIENS_IN_USE = 7


class Kind(IntEnum):
    """Which table a name lookup refers to."""

    DRINK = 98
    INGREDIENT = 99


_ERROR_TEXT = {
    ErrorCode.NO_ERRORS: "NO_ERRORS",
    ErrorCode.DB_FAILED_TO_OPEN: "DB_FAILED_TO_OPEN",
    ErrorCode.DB_QUERY_FAIL: "DB_QUERY_FAIL",
    ErrorCode.DB_INGREDIENS_NOT_FOUND: "DB_INGREDIENS_NOT_FOUND",
    ErrorCode.UNDEFINED_PARAMETER: "UNDEFINED_PARAMETER",
    ErrorCode.DB_ENTRY_ALREADY_EXIST: "DB_ENTRY_ALREADY_EXIST",
    ErrorCode.DB_DRINK_NOT_FOUND: "DB_DRINK_NOT_FOUND",
}


def error_text(code: int) -> str:
    """Human-readable name of an error code, or ``UNKNOWN ERROR``."""
    return _ERROR_TEXT.get(code, "UNKNOWN ERROR")


class DatabaseError(Exception):
    """A database operation failed; ``code`` says why."""

    def __init__(self, code: ErrorCode, detail: str | None = None) -> None:
        self.code = ErrorCode(code)
        super().__init__(detail or self.code.name)


_TABLES = {Kind.DRINK: "Drinks", Kind.INGREDIENT: "Ingredienser"}

_DRINK_COLUMNS = (
    ["Navn TEXT"]
    + [
        column
        for slot in range(1, SLOTS + 1)
        for column in (f"cont_{slot}_name TEXT", f"cont_{slot}_amt INTEGER")
    ]
    + ["path TEXT"]
)

_SCHEMA = (
    f"CREATE TABLE IF NOT EXISTS Drinks ({', '.join(_DRINK_COLUMNS)})",
    "CREATE TABLE IF NOT EXISTS Ingredienser (Navn TEXT, Addr INTEGER)",
    'CREATE TABLE IF NOT EXISTS Bestillinger '
    '("Dag" INTEGER, "Måned" INTEGER, "År" INTEGER, "Navn" TEXT)',
)

_PATH_COLUMN = 1 + 2 * SLOTS
# Only the first eight columns of a drink row are matched against ingredients.
_ADDRESS_COLUMNS = 8


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _kind(kind: Any) -> Kind:
    try:
        return Kind(kind)
    except (ValueError, TypeError):
        raise DatabaseError(ErrorCode.UNDEFINED_PARAMETER) from None


class DrinkDatabase:
    """Thread-safe access to the drinks database."""

    def __init__(self, path: str | Path = ":memory:", logger: Any = None) -> None:
        self._logger = logger
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(str(path), check_same_thread=False)
        except sqlite3.Error as exc:
            self._log("Database failed to open")
            raise DatabaseError(ErrorCode.DB_FAILED_TO_OPEN, str(exc)) from exc
        self._log("Database loaded.")

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.log(message)

    def create_schema(self) -> None:
        """Create the Drinks, Ingredienser and Bestillinger tables if missing."""
        for statement in _SCHEMA:
            self.query(statement)

    def query(self, sql: str, params: Iterable[Any] = ()) -> list[list[str]]:
        """Run one statement and return every row as a list of strings."""
        with self._lock:
            try:
                rows = self._conn.execute(sql, tuple(params)).fetchall()
                self._conn.commit()
            except sqlite3.Error as exc:
                self._log("Query failed.")
                raise DatabaseError(ErrorCode.DB_QUERY_FAIL, str(exc)) from exc
        self._log(f"Query to DB: {sql} executed.")
        return [[_text(value) for value in row] for row in rows]

    def _rows(self, kind: Kind) -> list[list[str]]:
        return self.query(f"SELECT * FROM {_TABLES[kind]}")

    def drink_listing(self) -> list[tuple[str, str]]:
        """Every drink as a (name, image path) pair, in table order."""
        return [(row[0], row[_PATH_COLUMN]) for row in self._rows(Kind.DRINK)]

    def addresses(self, name: str) -> list[int]:
        """Container addresses of the ingredients a drink refers to."""
        wanted = [
            cell
            for row in self._rows(Kind.DRINK)
            if row[0] == name
            for cell in row[:_ADDRESS_COLUMNS]
        ]
        return [
            atoi(row[1])
            for row in self._rows(Kind.INGREDIENT)
            for cell in wanted
            if row[0] == cell
        ]

    def has_name(self, kind: Kind, name: str) -> bool:
        table = _kind(kind)
        return any(row[0] == name for row in self._rows(table))

    def ingredient_names(self) -> list[str]:
        return [row[0] for row in self._rows(Kind.INGREDIENT)]

    def create_drink(self, drink: Drink) -> None:
        if self.has_name(Kind.DRINK, drink.name):
            raise DatabaseError(ErrorCode.DB_ENTRY_ALREADY_EXIST)
        values: list[Any] = [drink.name]
        for slot in drink.content:
            values.extend((slot.name, slot.amount))
        values.append(drink.path)
        placeholders = ", ".join("?" * len(values))
        self.query(f"INSERT INTO Drinks VALUES({placeholders})", values)

    def get_drink(self, name: str) -> Drink:
        self._log("Searching for " + name)
        for row in self._rows(Kind.DRINK):
            if row[0] == name:
                content = [
                    DrinkContent(row[1 + 2 * slot], atoi(row[2 + 2 * slot]))
                    for slot in range(SLOTS)
                ]
                return Drink(row[0], row[_PATH_COLUMN], content)
        raise DatabaseError(ErrorCode.DB_DRINK_NOT_FOUND)

    def in_use(self, name: str) -> bool:
        """True when any column of any drink equals ``name``."""
        return any(name in row for row in self._rows(Kind.DRINK))

    def container_in_use(self, addr: int) -> bool:
        return any(atoi(row[1]) == addr for row in self._rows(Kind.INGREDIENT))

    def change_drink(self, drink: Drink) -> None:
        """Replace the drink of the same name; creates it if absent."""
        try:
            self.remove(drink.name, Kind.DRINK)
        except DatabaseError as exc:
            if exc.code is not ErrorCode.DB_DRINK_NOT_FOUND:
                raise
        self.create_drink(drink)

    def remove(self, name: str, kind: Kind) -> None:
        table = _kind(kind)
        if table is Kind.DRINK:
            if not self.has_name(Kind.DRINK, name):
                raise DatabaseError(ErrorCode.DB_DRINK_NOT_FOUND)
        else:
            if not self.has_name(Kind.INGREDIENT, name):
                raise DatabaseError(ErrorCode.DB_INGREDIENS_NOT_FOUND)
            if self.in_use(name):
                raise DatabaseError(ErrorCode.DB_INGREDIENS_IN_USE)
        self.query(f"DELETE FROM {_TABLES[table]} WHERE Navn=?", (name,))

    def create_ingredient(self, name: str, addr: int) -> None:
        if self.has_name(Kind.INGREDIENT, name):
            raise DatabaseError(ErrorCode.DB_ENTRY_ALREADY_EXIST)
        self.query("INSERT INTO Ingredienser VALUES(?, ?)", (name, int(addr)))

    def ingredient_address(self, name: str) -> int:
        """Container address of an ingredient (the last match wins)."""
        matches = [atoi(row[1]) for row in self._rows(Kind.INGREDIENT) if row[0] == name]
        if not matches:
            raise DatabaseError(ErrorCode.DB_INGREDIENS_NOT_FOUND)
        return matches[-1]

    def change_ingredient_address(self, name: str, addr: int) -> None:
        self.query("UPDATE Ingredienser SET Addr=? WHERE Navn=?", (int(addr), name))

    def save_order(self, name: str, when: datetime | None = None) -> None:
        """Record that a drink was ordered on the given (or current) date."""
        stamp = format_time(when, False)
        day, month, year = atoi(stamp[0:2]), atoi(stamp[2:4]), atoi(stamp[4:8])
        self.query(
            "INSERT INTO Bestillinger VALUES(?, ?, ?, ?)", (day, month, year, name)
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        self._log("Database closed.")

    def __enter__(self) -> "DrinkDatabase":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()