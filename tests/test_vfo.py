import logging

import pytest

from ampctl.vfo import VFO, VFOType, set_vfo_frequency


@pytest.fixture
def records(caplog):
    logger = logging.getLogger("ampctl")
    caplog.set_level(logging.DEBUG, logger="ampctl")
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)


def test_vfo_type_values():
    assert VFOType(0) is VFOType.NONE
    assert VFOType(1) is VFOType.DDS
    assert VFO(VFOType(2)).type is VFOType.EXTERNAL


def test_vfo_defaults():
    vfo = VFO()
    assert vfo.type is VFOType.NONE
    assert vfo.input == 0
    assert vfo.freq == 0.0


def test_vfo_holds_values():
    vfo = VFO(VFOType.DDS, 2, 14_074_000.0)
    assert (vfo.type, vfo.input, vfo.freq) == (VFOType.DDS, 2, 14_074_000.0)


@pytest.mark.parametrize("kind", list(VFOType))
def test_set_frequency_succeeds(kind):
    assert set_vfo_frequency(kind, 1, 7_100_000.0) is True


def test_set_frequency_logs_request(records):
    result = set_vfo_frequency(VFOType.EXTERNAL, 3, 10_000_000.0)
    assert result is True
    messages = [r.getMessage() for r in records.records]
    assert any("input #3" in m and "type: 2" in m for m in messages)