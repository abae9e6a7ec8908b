"""Thermal sensors, temperature conversion and over-temperature checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ampctl.logger import LOGGER_NAME, LogPriority
from ampctl.state import GlobalState

_log = logging.getLogger(LOGGER_NAME)

SENSOR_ENCLOSURE = 0
SENSOR_INLET = 1
SENSOR_LOW_FINAL = 1000
SENSOR_LOW_LPF = 1001
SENSOR_HIGH_FINAL = 2000
SENSOR_HIGH_LPF = 2001


@dataclass
class ThermalLimits:
    """Warning and maximum temperatures (degF) for each monitored spot."""

    encl_warn: int = 130
    encl_max: int = 140
    encl_target: int = 0
    final_warn: int = 170
    final_max: int = 190
    final_target: int = 0
    inlet_warn: int = 100
    inlet_max: int = 120
    inlet_target: int = 0
    lpf_warn: int = 100
    lpf_max: int = 120
    lpf_target: int = 0


def degc_to_degf(temp_c: float) -> float:
    """Convert Celsius to Fahrenheit."""
    return temp_c * 9.0 / 5.0 + 32.0


def degf_to_degc(temp_f: float) -> float:
    """Convert Fahrenheit to Celsius."""
    return (temp_f - 32.0) * 5.0 / 9.0


def get_thermal(rig: GlobalState, sensor: int) -> float:
    """Read a temperature sensor by number; raises ValueError if unknown."""
    readings = {
        SENSOR_ENCLOSURE: rig.therm_enclosure,
        SENSOR_INLET: rig.therm_inlet,
        SENSOR_LOW_FINAL: rig.low_amp.therm_final,
        SENSOR_LOW_LPF: rig.low_amp.therm_lpf,
        SENSOR_HIGH_FINAL: rig.high_amp.therm_final,
        SENSOR_HIGH_LPF: rig.high_amp.therm_lpf,
    }
    try:
        return readings[sensor]
    except KeyError:
        raise ValueError(f"unknown thermal sensor {sensor}") from None


def are_we_on_fire(rig: GlobalState, limits: Optional[ThermalLimits] = None) -> bool:
    """Log any warning temperatures; True if any maximum is reached."""
    if limits is None:
        limits = ThermalLimits()
    crit = LogPriority.CRIT.level

    warnings = [
        ("Enclosure", rig.therm_enclosure, limits.encl_warn, limits.encl_warn),
        ("Inlet", rig.therm_inlet, limits.inlet_warn, limits.inlet_warn),
        ("LPF (Low)", rig.low_amp.therm_lpf, limits.lpf_warn, limits.lpf_warn),
        ("LPF (High)", rig.high_amp.therm_lpf, limits.lpf_warn, limits.lpf_warn),
        ("FINALS (Low)", rig.low_amp.therm_final, limits.lpf_warn, limits.final_warn),
        ("FINALS (High)", rig.high_amp.therm_final, limits.lpf_warn, limits.final_warn),
    ]
    for name, value, threshold, shown in warnings:
        if value >= threshold:
            _log.log(crit, "THERMAL WARNING: %s %d > %d degF!", name, value, shown)

    maxima = [
        (rig.therm_enclosure, limits.encl_max),
        (rig.therm_inlet, limits.inlet_max),
        (rig.low_amp.therm_final, limits.final_max),
        (rig.low_amp.therm_lpf, limits.lpf_max),
        (rig.high_amp.therm_final, limits.final_max),
        (rig.high_amp.therm_lpf, limits.lpf_max),
    ]
    return any(value >= limit for value, limit in maxima)