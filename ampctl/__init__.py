"""Amplifier and antenna tuner control: rig state, faults, PTT interlock, thermals, EEPROM settings, CRC-32, I2C and KPA-500 style CAT."""

__version__ = "0.1.0"