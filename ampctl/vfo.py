"""Variable frequency oscillators."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ampctl.logger import LOGGER_NAME, LogPriority

_log = logging.getLogger(LOGGER_NAME)


class VFOType(enum.IntEnum):
    NONE = 0  # not present
    DDS = 1  # direct digital synthesizer
    EXTERNAL = 2  # external frequency reference


@dataclass
class VFO:
    """One oscillator: its kind, input number and frequency in hertz."""

    type: VFOType = VFOType.NONE
    input: int = 0
    freq: float = 0.0


def set_vfo_frequency(vfo_type: VFOType, input_no: int, freq: float) -> bool:
    """Retune an oscillator input; returns True on success."""
    _log.log(
        LogPriority.INFO.level,
        "Setting VFO (type: %d) input #%d to %f",
        int(vfo_type),
        input_no,
        freq,
    )
    return True