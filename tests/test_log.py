from datetime import datetime

from drinkctl.log import Logger, format_time

MOMENT = datetime(2015, 5, 17, 22, 45, 41)


def test_format_time_full():
    assert format_time(MOMENT, True) == "17/05-2015@22:45:41"


def test_format_time_date_only():
    assert format_time(MOMENT, False) == "17052015"


def test_format_time_date_is_prefix_of_components():
    stamp = format_time(MOMENT, False)
    assert (stamp[0:2], stamp[2:4], stamp[4:8]) == ("17", "05", "2015")


def test_logger_file_named_after_date(tmp_path):
    with Logger(tmp_path, clock=lambda: MOMENT) as logger:
        assert logger.path == tmp_path / format_time(MOMENT, False)


def test_logger_writes_timestamped_line(tmp_path):
    with Logger(tmp_path, clock=lambda: MOMENT) as logger:
        logger.log("hello")
        path = logger.path
    assert path.read_text(encoding="utf-8") == f"{format_time(MOMENT, True)}:\thello\n"


def test_logger_appends_across_instances(tmp_path):
    with Logger(tmp_path, clock=lambda: MOMENT) as first:
        first.log("one")
    with Logger(tmp_path, clock=lambda: MOMENT) as second:
        second.log("two")
        path = second.path
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [line.split("\t", 1)[1] for line in lines] == ["one", "two"]


def test_close_is_idempotent(tmp_path):
    logger = Logger(tmp_path, clock=lambda: MOMENT)
    logger.log("x")
    logger.close()
    logger.close()
    assert logger.path.read_text(encoding="utf-8").endswith("\tx\n")