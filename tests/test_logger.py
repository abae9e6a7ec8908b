import logging
from datetime import datetime

import pytest

from ampctl.logger import (
    LogPriority,
    RigFormatter,
    format_line,
    priority_name,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    shutdown_logging()


@pytest.mark.parametrize(
    "priority, name",
    [
        (LogPriority.CRIT, "CRIT"),
        (LogPriority.WARN, "WARN"),
        (LogPriority.INFO, "INFO"),
        (LogPriority.DEBUG, "DBUG"),
    ],
)
def test_priority_names(priority, name):
    assert priority_name(priority) == name


def test_unknown_priority_name():
    assert priority_name(42) == "NONE"


def test_format_line_layout():
    when = datetime(2024, 1, 2, 3, 4, 5)
    assert format_line(LogPriority.INFO, "hello", when) == "2024/01/02 03:04:05 INFO: hello"


def test_format_line_truncates_long_messages():
    line = format_line(LogPriority.WARN, "x" * 2000, datetime(2024, 1, 2, 3, 4, 5))
    message = line.split("WARN: ", 1)[1]
    assert message == "x" * 510


def test_formatter_maps_levels():
    formatter = RigFormatter()
    record = logging.LogRecord("ampctl", logging.ERROR, __file__, 1, "boom %d", (7,), None)
    assert formatter.format(record).endswith("CRIT: boom 7")
    record = logging.LogRecord("ampctl", logging.DEBUG, __file__, 1, "dbg", (), None)
    assert formatter.format(record).endswith("DBUG: dbg")


def test_level_round_trip():
    for priority in LogPriority:
        assert LogPriority.from_level(priority.level) is priority


def test_setup_writes_file_and_echoes(tmp_path, capsys):
    path = tmp_path / "rig.log"
    setup_logging(path, echo=True)
    logging.getLogger("ampctl.test").warning("relay stuck")
    shutdown_logging()
    lines = path.read_text().splitlines()
    assert len(lines) == 1
    assert lines[0].endswith("WARN: relay stuck")
    assert capsys.readouterr().out.strip() == lines[0]


def test_setup_appends(tmp_path):
    path = tmp_path / "rig.log"
    path.write_text("old\n")
    setup_logging(path, echo=False)
    logging.getLogger("ampctl").info("new")
    shutdown_logging()
    lines = path.read_text().splitlines()
    assert lines[0] == "old"
    assert lines[1].endswith("INFO: new")


def test_unopenable_file_logs_nothing(tmp_path, capsys):
    setup_logging(tmp_path / "missing" / "rig.log", echo=True)
    logging.getLogger("ampctl").critical("lost")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""