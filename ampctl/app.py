"""The radio controller: start-up, signal handling and the main loop."""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import signal
import sys
import time
from pathlib import Path
from typing import Optional

from ampctl.cat import CatError, CatParser
from ampctl.cat_kpa500 import Kpa500
from ampctl.eeprom import Eeprom, EepromError
from ampctl.i2c import I2CBus, I2CError
from ampctl.logger import LOGGER_NAME, LogPriority, setup_logging, shutdown_logging
from ampctl.ptt import PttControl
from ampctl.state import GlobalState
from ampctl.thermal import ThermalLimits, are_we_on_fire

_log = logging.getLogger(LOGGER_NAME)

VERSION = "0.1.0"
DEFAULT_LOG_FILE = "radio.log"
DEFAULT_EEPROM_FILE = "eeprom.bin"
DEFAULT_CAT_PIPE = "radio.cat"
I2C_BUSES = (1, 2)


def _signals(*names: str) -> frozenset:
    return frozenset(
        getattr(signal, name) for name in names if hasattr(signal, name)
    )


_RELOAD = _signals("SIGHUP")
_USER = _signals("SIGUSR1", "SIGUSR2")
_FATAL = _signals("SIGINT", "SIGTERM")
_CAUGHT = tuple(sorted(_FATAL | _RELOAD | _USER))


class Radio:
    """Ties the rig state to PTT, thermal protection and CAT control."""

    def __init__(
        self, rig: Optional[GlobalState] = None, cat_pipe=DEFAULT_CAT_PIPE
    ) -> None:
        self.rig = rig if rig is not None else GlobalState().reset()
        self.cat_pipe = Path(cat_pipe)
        self.limits = ThermalLimits()
        self.ptt = PttControl(self.rig)
        self.amplifier = Kpa500(self.rig, version=VERSION)
        self.cat = CatParser(self.amplifier.parse_line)
        self.dying = False

    def atu_init(self) -> bool:
        """Bring up the antenna matching units."""
        _log.log(LogPriority.INFO.level, "Antenna Matching Unit (ATU) initialized")
        return True

    def host_cleanup(self) -> None:
        """Close the CAT pipe and remove it from the filesystem."""
        print("Goodbye!")
        if self.rig.catpipe_fd is not None:
            with contextlib.suppress(OSError):
                os.close(self.rig.catpipe_fd)
            self.rig.catpipe_fd = None
        with contextlib.suppress(OSError):
            self.cat_pipe.unlink()

    def handle_signal(self, signum, frame=None) -> None:
        """React to a process signal; interrupt and terminate shut down."""
        if signum in _RELOAD:
            _log.log(LogPriority.INFO.level, "Caught SIGHUP")
        elif signum in _USER:
            pass
        elif signum in _FATAL:
            self.shutdown(0)
        else:
            _log.log(LogPriority.CRIT.level, "Caught unknown signal %d", signum)

    def install_signals(self) -> dict:
        """Route the handled signals here; returns the previous handlers."""
        return {
            signum: signal.signal(signum, self.handle_signal) for signum in _CAUGHT
        }

    def step(self, line: Optional[str]) -> Optional[str]:
        """One pass of the main loop: thermal check, then one CAT line.

        Returns the CAT reply, or None when the line gave none or was invalid.
        """
        if are_we_on_fire(self.rig, self.limits):
            self.ptt.set(False)
            self.ptt.set_blocked(True)
            _log.log(LogPriority.CRIT.level, "Radio is on fire?! Halted TX!")
        try:
            return self.cat.parse_line(line)
        except CatError:
            return None

    def shutdown(self, signum: int) -> None:
        """Clean up and leave with ``signum`` as the exit status."""
        self.dying = True
        if signum >= 0:
            _log.log(LogPriority.CRIT.level, "Shutting down by signal %d", signum)
        else:
            _log.log(
                LogPriority.CRIT.level,
                "Shutting down due to internal error: %d",
                -signum,
            )
        self.host_cleanup()
        raise SystemExit(signum)


def _restore_signals(previous: dict) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def _init_i2c(my_addr: int) -> list[I2CBus]:
    buses = [I2CBus(bus_id, my_addr) for bus_id in I2C_BUSES]
    try:
        for bus in buses:
            bus.open()
    except I2CError:
        _log.log(LogPriority.CRIT.level, "Error initializing i2c")
        for bus in buses:
            bus.close()
        return []
    try:
        buses[0].write(0x50, bytes([0x01, 0x02]))
        buses[1].read(0x60, 10)
    except I2CError as exc:
        _log.log(LogPriority.WARN.level, "i2c bus check failed: %s", exc)
    return buses


def _load_eeprom(eeprom: Eeprom, path: str) -> None:
    try:
        eeprom.open(path)
    except EepromError:
        return
    try:
        eeprom.load_config()
    except EepromError:
        pass
    try:
        eeprom.serial_number()
    except (KeyError, EepromError):
        _log.log(LogPriority.INFO.level, "Device serial number: unknown")


def _parse_args(argv) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ampctl", description="Radio controller.")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--eeprom", default=DEFAULT_EEPROM_FILE)
    parser.add_argument("--cat-pipe", default=DEFAULT_CAT_PIPE)
    parser.add_argument("--i2c-addr", type=lambda s: int(s, 0), default=0)
    parser.add_argument(
        "--iterations", type=int, default=0, help="loop passes, 0 for no limit"
    )
    parser.add_argument("--interval", type=float, default=1.0)
    parser.add_argument("--quiet", action="store_true", help="do not echo the log")
    return parser.parse_args(argv)


def _run(args: argparse.Namespace) -> int:
    info = LogPriority.INFO.level
    _log.log(info, "Radio firmware v%s starting...", VERSION)
    rig = GlobalState().reset()
    radio = Radio(rig, args.cat_pipe)
    previous = radio.install_signals()
    eeprom = Eeprom(rig)
    buses: list[I2CBus] = []
    try:
        _load_eeprom(eeprom, args.eeprom)
        buses = _init_i2c(args.i2c_addr)
        radio.atu_init()
        _log.log(info, "CAT Initialization successful")
        _log.log(info, "Radio initialization completed. Enjoy!")
        passes = 0
        while not radio.dying and (args.iterations == 0 or passes < args.iterations):
            radio.step("")
            passes += 1
            time.sleep(args.interval)
        return 0
    finally:
        for bus in buses:
            bus.close()
        eeprom.close()
        radio.host_cleanup()
        _restore_signals(previous)


def main(argv=None) -> int:
    """Start the radio controller and run its main loop."""
    args = _parse_args(sys.argv[1:] if argv is None else list(argv))
    setup_logging(args.log_file, echo=not args.quiet)
    try:
        return _run(args)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())