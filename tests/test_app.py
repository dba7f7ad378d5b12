import socket

import pytest

from drinkctl.app import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.port == 7913
    assert args.database == "/home/root/drinksdatabase.db"
    assert args.device == "/dev/spidev"


def test_parser_overrides():
    args = build_parser().parse_args(["--port", "8000", "--database", "x.db"])
    assert (args.port, args.database) == (8000, "x.db")


def test_bad_port_is_rejected():
    with pytest.raises(SystemExit) as info:
        main(["--port", "abc"])
    assert info.value.code == 2


def test_database_that_cannot_open(tmp_path, capsys):
    missing = tmp_path / "missing" / "drinks.db"
    assert main(["--log-dir", str(tmp_path), "--database", str(missing)]) == 1
    assert "database error" in capsys.readouterr().err
    logs = [path for path in tmp_path.iterdir() if path.is_file()]
    assert len(logs) == 1
    assert "Database failed to open" in logs[0].read_text(encoding="utf-8")


def test_busy_port_is_reported(tmp_path, capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        code = main(
            [
                "--log-dir", str(tmp_path),
                "--database", str(tmp_path / "drinks.db"),
                "--host", "127.0.0.1",
                "--port", str(port),
            ]
        )
    assert code == 1
    assert "cannot listen" in capsys.readouterr().err