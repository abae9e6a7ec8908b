# ampctl

Control software for a transmit amplifier with an antenna matching unit.
It keeps the rig state, records faults, guards push-to-talk with an
interlock, checks temperatures against limits, reads named settings from a
memory-mapped EEPROM image and answers KPA-500 style amplifier CAT commands.

## Installing

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Running the controller

```
ampctl [--log-file radio.log] [--eeprom eeprom.bin] [--cat-pipe radio.cat]
       [--i2c-addr 0] [--iterations 0] [--interval 1.0] [--quiet]
```

On start-up `ampctl`:

1. appends log lines (`YYYY/MM/DD HH:MM:SS PRIO: message`) to `--log-file`,
   echoing them to stdout unless `--quiet` is given; if the log file cannot be
   opened, nothing is logged;
2. clears the rig state and applies the minimum defaults (fault beep on,
   stay in standby on band change, T/R delay 50);
3. opens the `--eeprom` image if it exists, checks its CRC-32 checksum and
   reads the settings and the `device/serial` setting;
4. opens `/dev/i2c-1` and `/dev/i2c-2` with `--i2c-addr` (decimal or `0x..`)
   as its own address, writes two bytes to device 0x50 on bus 1 and reads ten
   bytes from device 0x60 on bus 2; failures are logged and start-up goes on;
5. initialises the antenna matching unit and CAT control.

It then runs its main loop every `--interval` seconds, `--iterations` times
(0 means until stopped). Each pass checks the thermal limits; when any
maximum is reached, PTT is dropped and transmit is blocked. SIGINT or SIGTERM
shut the controller down, SIGHUP is logged. On exit the I2C buses and the
EEPROM image are closed and the `--cat-pipe` path is removed.

## Checksumming files

```
ampctl-crc32 FILE [FILE ...]
```

Prints the 32-bit CRC (ANSI X3.66; the same polynomial as zlib), the byte
count and the name of each file. Files that cannot be read are reported on
stderr. The exit status is 0 when at least one file was read, 1 otherwise.

## Using the library

```python
from ampctl.state import GlobalState
from ampctl.ptt import PttControl
from ampctl.faults import FaultCode, set_fault
from ampctl.thermal import ThermalLimits, are_we_on_fire, degc_to_degf
from ampctl.crc32 import crc32_buffer

rig = GlobalState().reset()     # cleared, then minimum defaults

ptt = PttControl(rig)
ptt.set(True)                   # True: keyed
ptt.set_blocked(True)           # interlock on
ptt.toggle()                    # False: refused while blocked

set_fault(rig, FaultCode.HIGH_SWR)    # returns the code in effect (4)
set_fault(rig, FaultCode.STUCK_RELAY) # lower code: still 4, rig.faults == 2

rig.therm_enclosure = 150
are_we_on_fire(rig, ThermalLimits())  # True: enclosure maximum is 140 degF

degc_to_degf(100.0)                   # 212.0
hex(crc32_buffer(b"123456789"))       # '0xcbf43926'
```

### Amplifier CAT commands

`CatParser` takes one `;`-terminated line, drops anything after a CR or LF,
and hands lines starting with `^` (without the prefix) to the amplifier
parser. An empty line raises `CatError`; a line without its `;` raises
`IncompleteCommand`.

```python
from ampctl.cat import CatParser
from ampctl.cat_kpa500 import Kpa500

amp = Kpa500(rig, version="1.0", serial=42)
cat = CatParser(amp.parse_line)

cat.parse_line("^AL123;")   # '^AL123;'  ALC for the current band (0-210)
cat.parse_line("^AR9999;")  # '^AR5000;' clamped to 1400-5000
cat.parse_line("^BN03;")    # '^BN03;'   band must be 1-15, else CatError
cat.parse_line("^SN;")      # '^SN00042;'
```

`Kpa500.commands()` lists the whole table (AL, AR, BC, BN, BRP, BRX, DMO, FC,
FL, NH, ON, OS, PJ, RVM, SN, SP, TM, TR, VI, WS, XI) and
`Kpa500.handle(verb, args)` runs one command directly; `args=None` is a
query. Unknown verbs raise `CatError`.

### EEPROM settings

```python
from ampctl.eeprom import Eeprom, EepromType, LayoutEntry

layout = [
    LayoutEntry("device/serial", 1, 8, EepromType.STR),
    LayoutEntry("amp/fan", 9, 4, EepromType.INT),
]
with Eeprom(rig, layout).open("eeprom.bin") as ee:
    settings = ee.load_config()     # {'device/serial': '...', 'amp/fan': '...'}
    ee.get_int_by_key("amp/fan")
```

The last four bytes of the image hold a little-endian CRC-32 of everything
before them. `load_config` raises `EepromError` and sets
`rig.eeprom_corrupted` on a mismatch. `write_config` stores a fresh checksum
when `rig.eeprom_dirty` is set, refusing a corrupted image unless `force` is
given; `write_pending_changes` does so once a change is more than 60 seconds
old. Key lookup matches the first entry whose name starts with the key,
ignoring case, and raises `KeyError` otherwise.

### Modules

- `ampctl.state`: `GlobalState` (with `load_defaults` and `reset`),
  `AmpState`, `ATUState`, `FilterState`, `TuningState`, `LPFSelection`,
  `BPFSelection`, `FilterType`.
- `ampctl.logger`: `LogPriority`, `priority_name`, `format_line`,
  `RigFormatter`, `setup_logging`, `shutdown_logging`.
- `ampctl.crc32`: `update_crc32`, `crc32_buffer`, `crc32_file`, `main`.
- `ampctl.faults`: `FaultCode`, `set_fault`.
- `ampctl.ptt`: `PttControl`.
- `ampctl.thermal`: `ThermalLimits`, `get_thermal` (sensors 0, 1, 1000, 1001,
  2000, 2001; others raise `ValueError`), `are_we_on_fire`, `degc_to_degf`,
  `degf_to_degc`.
- `ampctl.power`: `get_voltage`, `get_current`, `get_swr`, `get_power`,
  `check_power_thresholds`.
- `ampctl.vfo`: `VFOType`, `VFO`, `set_vfo_frequency`.
- `ampctl.eeprom`: `Eeprom`, `LayoutEntry`, `EepromType`, `EepromError`.
- `ampctl.cat`: `CatParser`, `CatCommand`, `CatError`, `IncompleteCommand`.
- `ampctl.cat_kpa500`: `Kpa500`.
- `ampctl.transport`: `Transport` and `InputType`, over a TCP socket (dotted
  IPv4 address and port), a device node or a named pipe; usable as a context
  manager.
- `ampctl.i2c`: `I2CBus` and `I2CError`, for Linux `/dev/i2c-N` buses.
- `ampctl.app`: `Radio` and the `main` entry point.

## What it does not do

- The controller's main loop does not read CAT commands from any port, pipe
  or socket: each pass parses an empty line. The CAT parsers and `Transport`
  are there to be wired together by the caller.
- There are no rig (transceiver) CAT commands; only the `^` amplifier
  commands are answered.
- No voltage, current, SWR or power measurements are connected: the
  `ampctl.power` readings are always 0.0 and `check_power_thresholds` finds
  nothing.
- No EEPROM layout is shipped; `Eeprom` works only with a layout you supply,
  and changing individual settings in the image is not supported (only the
  checksum is rewritten).
- There is no GPIO, USB, antenna tuning or filter switching support, and
  `set_vfo_frequency` only logs the request.