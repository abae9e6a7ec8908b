"""Push-to-talk control and the interlock that can block it."""

from __future__ import annotations

import logging

from ampctl.logger import LOGGER_NAME, LogPriority
from ampctl.state import GlobalState

_log = logging.getLogger(LOGGER_NAME)


class PttControl:
    """Keys and unkeys the transmitter, honouring the TX block flag."""

    def __init__(self, rig: GlobalState) -> None:
        self.rig = rig

    def check_blocked(self) -> bool:
        """True when transmitting is currently blocked."""
        return bool(self.rig.tx_blocked)

    def set_blocked(self, blocked: bool) -> bool:
        """Block or unblock transmitting; returns the new setting."""
        self.rig.tx_blocked = bool(blocked)
        return self.rig.tx_blocked

    def set(self, ptt: bool) -> bool:
        """Request PTT on or off; returns the PTT state, False if blocked."""
        if self.check_blocked():
            _log.log(LogPriority.WARN.level, "PTT request while blocked")
            return False
        self.rig.ptt = bool(ptt)
        return self.rig.ptt

    def toggle(self) -> bool:
        """Invert the PTT state, subject to the block."""
        return self.set(not self.rig.ptt)