[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ampctl"
version = "0.1.0"
description = "Control software for a transmit amplifier and antenna tuner: rig state, faults, PTT interlocks, thermals, EEPROM settings and KPA-500 style CAT commands"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ham radio",
    "amateur radio",
    "amplifier",
    "antenna tuner",
    "cat",
    "kpa500",
    "eeprom",
    "crc32",
    "i2c",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ampctl = "ampctl.app:main"
ampctl-crc32 = "ampctl.crc32:main"

[tool.hatch.build.targets.wheel]
packages = ["ampctl"]

[tool.pytest.ini_options]
addopts = "-ra"
