import pytest

from ampctl.power import (
    SUPPLY_12V,
    SUPPLY_48V,
    check_power_thresholds,
    get_current,
    get_power,
    get_swr,
    get_voltage,
)


@pytest.mark.parametrize("src", [SUPPLY_12V, SUPPLY_48V])
def test_supply_readings_are_zero(src):
    assert get_voltage(src) == 0.0
    assert get_current(src) == 0.0


@pytest.mark.parametrize("amp", [0, 1])
def test_rf_readings_are_zero(amp):
    assert get_swr(amp) == 0.0
    assert get_power(amp) == 0.0


def test_no_threshold_violations():
    assert check_power_thresholds() == 0