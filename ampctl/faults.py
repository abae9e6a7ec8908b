"""Fault bookkeeping: count fault events and keep the most severe code."""

from __future__ import annotations

import enum
import logging

from ampctl.logger import LOGGER_NAME, LogPriority
from ampctl.state import GlobalState

_log = logging.getLogger(LOGGER_NAME)


class FaultCode(enum.IntEnum):
    """Fault codes; a higher number replaces a lower one in the fault register."""

    NONE = 0x00
    STUCK_RELAY = 0x01  # self test found a stuck relay
    INLET_THERMAL = 0x02  # inlet air too hot
    TOO_HOT = 0x03  # enclosure ambient too high
    HIGH_SWR = 0x04  # VSWR above threshold
    FINAL_THERMAL = 0x05  # final too hot
    FINAL_LOW_CURRENT = 0x06  # final supply current far below expected
    FINAL_HIGH_CURRENT = 0x07  # final supply current too high
    FINAL_LOW_VOLT = 0x08  # final supply voltage too low
    FINAL_HIGH_VOLT = 0x09  # final supply voltage too high
    TOT_TIMEOUT = 0x0A  # time-out timer expired
    UNKNOWN = 0x64


def set_fault(rig: GlobalState, fault: int) -> int:
    """Record a fault event and return the fault code now in effect.

    Every call counts as an event; the stored code is only replaced when the
    new one is numerically higher (more severe).
    """
    rig.faults += 1
    fault = int(fault)
    if fault > rig.fault_code:
        _log.log(
            LogPriority.CRIT.level,
            "Fault event [%d] code %d set exceeds last (%d), raising fault level!",
            rig.faults,
            fault,
            rig.fault_code,
        )
        rig.fault_code = fault
    else:
        _log.log(
            LogPriority.WARN.level,
            "Fault event [%d] code %d is lower priority than last (%d), "
            "not raising fault level!",
            rig.faults,
            fault,
            rig.fault_code,
        )
    return rig.fault_code