import logging

import pytest

from ampctl.faults import FaultCode, set_fault
from ampctl.state import GlobalState


@pytest.fixture
def records(caplog):
    logger = logging.getLogger("ampctl")
    caplog.set_level(logging.DEBUG, logger="ampctl")
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)


def test_fault_codes_fixed_by_source():
    assert FaultCode(0) is FaultCode.NONE
    assert FaultCode(0x04) is FaultCode.HIGH_SWR
    assert FaultCode(0x0A) is FaultCode.TOT_TIMEOUT
    assert set_fault(GlobalState(), 0x64) == FaultCode.UNKNOWN


def test_higher_fault_raises_level():
    rig = GlobalState()
    assert set_fault(rig, FaultCode.HIGH_SWR) == FaultCode.HIGH_SWR
    assert rig.fault_code == FaultCode.HIGH_SWR
    assert rig.faults == 1


def test_lower_fault_keeps_level_but_counts():
    rig = GlobalState()
    set_fault(rig, FaultCode.FINAL_THERMAL)
    result = set_fault(rig, FaultCode.STUCK_RELAY)
    assert result == FaultCode.FINAL_THERMAL
    assert rig.fault_code == FaultCode.FINAL_THERMAL
    assert rig.faults == 2


def test_equal_fault_does_not_change_code():
    rig = GlobalState()
    set_fault(rig, FaultCode.TOO_HOT)
    set_fault(rig, FaultCode.TOO_HOT)
    assert rig.fault_code == FaultCode.TOO_HOT
    assert rig.faults == 2


def test_fault_code_never_decreases():
    rig = GlobalState()
    seen = []
    for code in [3, 1, 9, 2, 9, 0x64, 5]:
        seen.append(set_fault(rig, code))
    assert seen == sorted(seen)
    assert rig.fault_code == FaultCode.UNKNOWN
    assert rig.faults == 7


def test_raising_logs_critical(records):
    rig = GlobalState()
    result = set_fault(rig, FaultCode.HIGH_SWR)
    assert result == FaultCode.HIGH_SWR
    assert any(r.levelno == logging.CRITICAL for r in records.records)


def test_lower_logs_warning(records):
    rig = GlobalState()
    rig.fault_code = FaultCode.TOT_TIMEOUT
    result = set_fault(rig, FaultCode.HIGH_SWR)
    assert result == FaultCode.TOT_TIMEOUT
    levels = {r.levelno for r in records.records}
    assert logging.WARNING in levels
    assert logging.CRITICAL not in levels