"""Rig state: operating flags, statistics and sub-unit state."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any, Optional

MAX_BANDS = 16
"""Number of per-band slots kept for each amplifier."""

DEFAULT_TR_DELAY = 50


class TuningState(enum.IntEnum):
    UNKNOWN = 0
    TUNING = 1
    TUNE_FAILED = 2
    TX_READY = 3


class LPFSelection(enum.IntEnum):
    """Transmit low pass filter choices."""

    NONE = 0
    M160 = 1
    M80 = 2
    M40 = 3
    M30_20 = 4
    M17_15 = 5
    M12_10 = 6
    LOW_USER1 = 7
    LOW_USER2 = 8
    M6 = 9
    M2 = 10
    M1_25 = 11
    CM70 = 12
    HIGH_USER1 = 13
    HIGH_USER2 = 14


class BPFSelection(enum.IntEnum):
    """Receive band pass filter choices."""

    NONE = 0
    M160_80 = 1
    M60_40 = 2
    M30_20 = 3
    M17_15 = 4
    M12_10 = 5


class FilterType(enum.IntFlag):
    NONE = 0x0000
    LPF = 0x0001
    BPF = 0x0002
    HPF = 0x0004
    NOTCH = 0x0010


def _band_slots() -> list[int]:
    return [0] * MAX_BANDS


@dataclass
class AmpState:
    """State of one power amplifier."""

    alc: list[int] = field(default_factory=_band_slots)  # 0-210, per band
    current_band: int = 0
    afr: int = 0
    inhibit: int = 0
    power: int = 0
    standby: int = 0
    output_target: list[int] = field(default_factory=_band_slots)
    power_target: float = 0.0
    therm_final: float = 0.0
    therm_lpf: float = 0.0


@dataclass
class ATUState:
    """Measured power at an antenna tuner."""

    power_fwd: float = 0.0
    power_rev: float = 0.0


@dataclass
class FilterState:
    lpf: LPFSelection = LPFSelection.NONE
    bpf: BPFSelection = BPFSelection.NONE


@dataclass
class GlobalState:
    """Everything the rig knows about itself."""

    tx_blocked: bool = False
    ptt: bool = False
    faultbeep: bool = False
    bc_standby: bool = False
    fan_speed: int = 0  # 0-6, 0 is auto
    fault_code: int = 0
    faults: int = 0
    tr_delay: int = 0
    eeprom_ready: bool = False
    eeprom_dirty: bool = False
    eeprom_corrupted: bool = False

    therm_inlet: float = 0.0
    therm_enclosure: float = 0.0

    time_tx_total: float = 0.0
    time_tx_last: float = 0.0
    power_tx_watts: float = 0.0

    low_amp: AmpState = field(default_factory=AmpState)
    high_amp: AmpState = field(default_factory=AmpState)
    low_atu: ATUState = field(default_factory=ATUState)
    high_atu: ATUState = field(default_factory=ATUState)
    low_filters: FilterState = field(default_factory=FilterState)
    high_filters: FilterState = field(default_factory=FilterState)

    # Host build handles
    eeprom_fd: Optional[int] = None
    eeprom_mmap: Optional[Any] = None
    logfile_fd: Optional[int] = None
    catpipe_fd: Optional[int] = None

    def load_defaults(self) -> GlobalState:
        """Apply the minimum defaults used until EEPROM settings are loaded."""
        self.faultbeep = True
        self.bc_standby = True
        self.tr_delay = DEFAULT_TR_DELAY
        return self

    def reset(self) -> GlobalState:
        """Clear every field, then apply the minimum defaults."""
        fresh = GlobalState()
        for f in dataclasses.fields(self):
            setattr(self, f.name, getattr(fresh, f.name))
        return self.load_defaults()