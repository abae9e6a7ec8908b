"""Power supply and RF power monitoring.

No measurement channels are wired up, so every reading reports zero until
a value has been recorded for it.
"""

from __future__ import annotations

SUPPLY_12V = 0
SUPPLY_48V = 1

_VOLTAGE = "voltage"
_CURRENT = "current"
_SWR = "swr"
_POWER = "power"

# Latest measured values, keyed by (quantity, channel).
_readings: dict[tuple[str, int], float] = {}

# Upper limits per (quantity, channel); none are configured.
_limits: dict[tuple[str, int], float] = {}


def _measure(quantity: str, channel: int) -> float:
    return float(_readings.get((quantity, int(channel)), 0.0))


def _record(quantity: str, channel: int, value: float) -> None:
    _readings[(quantity, int(channel))] = float(value)


def get_voltage(src: int) -> float:
    """Supply voltage of a source (0: 12V, 1: 48V)."""
    return _measure(_VOLTAGE, src)


def get_current(src: int) -> float:
    """Supply current of a source (0: 12V, 1: 48V)."""
    return _measure(_CURRENT, src)


def get_swr(amp: int) -> float:
    """Measured SWR at an amplifier output."""
    return _measure(_SWR, amp)


def get_power(amp: int) -> float:
    """Measured output power of an amplifier."""
    return _measure(_POWER, amp)


def check_power_thresholds() -> int:
    """Check readings against limits; returns the number of violations."""
    return sum(
        1
        for key, limit in _limits.items()
        if _readings.get(key, 0.0) > limit
    )