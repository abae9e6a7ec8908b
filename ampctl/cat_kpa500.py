"""Amplifier control commands in the KPA-500 style."""

from __future__ import annotations

import re
from functools import partial
from typing import Callable, Optional, Union

from ampctl.cat import CatCommand, CatError
from ampctl.power import get_current, get_power, get_swr, get_voltage
from ampctl.state import MAX_BANDS, AmpState, GlobalState
from ampctl.thermal import get_thermal

_ATOI = re.compile(r"\s*([+-]?\d+)")

# Commands whose answer never changes: baud rates are always 38400,
# demo mode is always off and the interface mode is fixed.
_FIXED_REPLIES = {
    "BRP": "3",
    "BRX": "3",
    "DMO": "0",
    "XI": "31",
}


def _atoi(text: str) -> int:
    """Leading integer of a string, 0 when there is none."""
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class Kpa500:
    """Handles amplifier queries and settings, returning reply strings.

    A handler called with ``args`` of None answers a query; otherwise it
    applies the setting first and answers with the new value.
    """

    def __init__(
        self,
        rig: GlobalState,
        amp: Optional[AmpState] = None,
        version: str = "0.0",
        serial: Union[int, str] = 0,
        thermal: Optional[Callable[[int], float]] = None,
    ) -> None:
        self.rig = rig
        self.amp = amp if amp is not None else rig.low_amp
        self.version = version
        self.serial = serial
        self.thermal = thermal if thermal is not None else self._rig_thermal
        self._commands = (
            CatCommand("AL", self._alc, 3, 3),
            CatCommand("AR", self._afr, 4, 4),
            CatCommand("BC", self._bc_standby, 1, 1),
            CatCommand("BN", self._band, 2, 2),
            CatCommand("BRP", partial(self._fixed, "BRP"), 1, 1),
            CatCommand("BRX", partial(self._fixed, "BRX"), 1, 1),
            CatCommand("DMO", partial(self._fixed, "DMO"), 1, 1),
            CatCommand("FC", self._fan, 1, 1),
            CatCommand("FL", self._faults, 1, 1),
            CatCommand("NH", self._inhibit, 1, 1),
            CatCommand("ON", self._power, 1, 1),
            CatCommand("OS", self._standby, 1, 1),
            CatCommand("PJ", self._power_level, 3, 3),
            CatCommand("RVM", self._fw_version, 0, 0),
            CatCommand("SN", self._serial, 0, 0),
            CatCommand("SP", self._fault_beep, 0, 0),
            CatCommand("TM", self._temperature, 0, 0),
            CatCommand("TR", self._tr_delay, 1, 2),
            CatCommand("VI", self._power_info, 0, 0),
            CatCommand("WS", self._swr, 0, 0),
            CatCommand("XI", partial(self._fixed, "XI"), 1, 1),
        )
        self._by_verb = {cmd.verb: cmd for cmd in self._commands}
        self._longest_first = sorted(
            self._commands, key=lambda cmd: len(cmd.verb), reverse=True
        )

    def commands(self) -> tuple[CatCommand, ...]:
        """The command table, in protocol order."""
        return self._commands

    def handle(self, verb: str, args: Optional[str] = None) -> str:
        """Run the command for a verb; raises CatError if unknown or invalid."""
        try:
            command = self._by_verb[verb]
        except KeyError:
            raise CatError(f"unknown amplifier command {verb!r}") from None
        return command.handler(args)

    def parse_line(self, line: str) -> str:
        """Split an amplifier line into verb and arguments and run it."""
        for command in self._longest_first:
            if line.startswith(command.verb):
                args = line[len(command.verb) :]
                return command.handler(args or None)
        raise CatError(f"unknown amplifier command {line!r}")

    # -- helpers --------------------------------------------------------

    def _rig_thermal(self, sensor: int) -> float:
        try:
            return get_thermal(self.rig, sensor)
        except ValueError:
            return -1

    @staticmethod
    def _setting(args: Optional[str], low: int, high: int) -> Optional[int]:
        if args is None:
            return None
        return _clamp(_atoi(args), low, high)

    # -- handlers -------------------------------------------------------

    @staticmethod
    def _fixed(verb: str, args: Optional[str]) -> str:
        """Answer a command whose reply is fixed, ignoring any arguments."""
        return f"^{verb}{_FIXED_REPLIES[verb]};"

    def _alc(self, args: Optional[str]) -> str:
        band = self.amp.current_band
        value = self._setting(args, 0, 210)
        if value is not None:
            self.amp.alc[band] = value
        return f"^AL{self.amp.alc[band]:03d};"

    def _afr(self, args: Optional[str]) -> str:
        value = self._setting(args, 1400, 5000)
        if value is not None:
            self.amp.afr = value
        return f"^AR{self.amp.afr:04d};"

    def _bc_standby(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 1)
        if value is not None:
            self.rig.bc_standby = bool(value)
        return f"^BC{int(self.rig.bc_standby)};"

    def _band(self, args: Optional[str]) -> str:
        if args is not None:
            band = _atoi(args)
            if band <= 0 or band >= MAX_BANDS:
                raise CatError(f"band {band} out of range")
            self.amp.current_band = band
        return f"^BN{self.amp.current_band:02d};"

    def _fan(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 6)
        if value is not None:
            self.rig.fan_speed = value
        return f"^FC{self.rig.fan_speed};"

    def _faults(self, args: Optional[str]) -> str:
        if args is not None:
            if not args.startswith("C"):
                raise CatError(f"invalid fault request {args!r}")
            self.rig.fault_code = 0
        return f"^FL{self.rig.fault_code:02d};"

    def _inhibit(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 1)
        if value is not None:
            self.amp.inhibit = value
        return f"^NH{self.amp.inhibit};"

    def _power(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 1)
        if value is not None:
            self.amp.power = value
        return f"^ON{self.amp.power};"

    def _standby(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 1)
        if value is not None:
            self.amp.standby = value
        return f"^OS{self.amp.standby};"

    def _power_level(self, args: Optional[str]) -> str:
        band = self.amp.current_band
        value = self._setting(args, 0, 1)
        if value is not None:
            self.amp.output_target[band] = value
        return f"^PJ{self.amp.output_target[band]:03d};"

    def _fw_version(self, args: Optional[str]) -> str:
        return f"^RVM{self.version};"

    def _serial(self, args: Optional[str]) -> str:
        if isinstance(self.serial, int):
            return f"^SN{self.serial:05d};"
        return f"^SN{str(self.serial).zfill(5)};"

    def _temperature(self, args: Optional[str]) -> str:
        sensor = self._setting(args, 0, 5)
        reading = self.thermal(0 if sensor is None else sensor)
        return f"^TM{int(reading):03d};"

    def _fault_beep(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 1)
        if value is not None:
            self.rig.faultbeep = bool(value)
        return f"^SP{int(self.rig.faultbeep)};"

    def _tr_delay(self, args: Optional[str]) -> str:
        value = self._setting(args, 0, 1)
        if value is not None:
            self.rig.tr_delay = value
        return f"^TR{self.rig.tr_delay:02d};"

    def _power_info(self, args: Optional[str]) -> str:
        volts = current = 0.0
        supply = self._setting(args, 0, 1)
        if supply is not None:
            volts = get_voltage(supply)
            current = get_current(supply)
        return f"^VI{int(volts):03d} {int(current):03d};"

    def _swr(self, args: Optional[str]) -> str:
        amp_no = 0
        swr = get_swr(amp_no)
        power = get_power(amp_no)
        return f"^WS{int(swr):03d} {int(power):03d};"