# sysclk

Data model and helpers for a console clock-control service. Everything is
plain Python: the parts that touch hardware or the service go through
objects you supply.

## Modules

- `sysclk.clocks`: the `Profile`, `Module`, `ThermalSensor`,
  `ReverseNXMode` and `GovernorConfig` enums. It has the `Context`,
  `OcExtra`, `FrequencyTable` and `TitleProfileList` dataclasses. Use
  `TitleProfileList.get_mhz` / `set_mhz` to get or set frequencies. The
  functions `get_governor_enabled` and `toggle_governor` work on governor
  flags. `format_module`, `format_thermal_sensor` and `format_profile` give
  display names (`pretty=True`) or configuration keys (`pretty=False`).
- `sysclk.config`: the `ConfigValue` keys. `format_config_value`,
  `default_config_value` and `is_valid_config_value` give each key's name,
  default and validity rule. `ConfigValueList` starts from the defaults, and
  its `set` raises `ValueError` for a value that is not acceptable.
- `sysclk.errors`: the `ErrorCode` enum and `result_code`, which packs an
  error into a service result code. The `SysClkError` exception carries the
  code and has a `result` property.
- `sysclk.apm`: the `APM_CONFIGURATIONS` table of `ApmConfiguration`
  entries. `find_apm_configuration(id)` returns the matching entry, or
  `None` for an unknown id.
- `sysclk.psm`: charger and battery enums and the `ChargeInfo` dataclass.
  `ChargeInfo` has `is_charger_connected`, `is_charging`, `battery_state` and
  `battery_state_icon`. The functions `power_role_to_str` and
  `charger_type_to_str` give display names, and `"Unknown"` for values they
  do not know.
- `sysclk.i2c`: register access through an `I2cBus` that you subclass, with
  `send` and `receive` methods. It provides:
  - `set_u8`, `read_u8` and `read_u16`;
  - `max17050_battery_current`, in mA, which returns `0.0` when the read
    fails;
  - the `BuckConverterDomain` rails, such as `ERISTA_CPU` and `MARIKO_GPU`,
    with `get_mv_out` and `set_mv_out`. `get_mv_out` returns `0` when the
    read fails. `set_mv_out` raises `I2cError` when the register does not
    hold the written value;
  - the fast-charge current encoding `bq24193_ma_to_raw` /
    `bq24193_raw_to_ma`, with `get_fast_charge_current_limit` and
    `set_fast_charge_current_limit`.
- `sysclk.ipc`: `SysClkClient` sends requests (`IpcCmd`) through a
  `Transport` that you subclass, with `dispatch`, `dispatch_out_buffer` and
  optionally `close`. The functions `unpack_context`,
  `pack_title_profile_list` / `unpack_title_profile_list`,
  `pack_config_values` / `unpack_config_values` and `unpack_frequency_table`
  encode and decode the wire structures. They raise `ValueError` on a size
  mismatch. A reply that is too short raises `IpcError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from sysclk.clocks import GovernorConfig, Module, Profile, format_profile, toggle_governor
from sysclk.config import ConfigValue, default_config_value, is_valid_config_value
from sysclk.errors import ErrorCode, result_code
from sysclk.i2c import bq24193_ma_to_raw, bq24193_raw_to_ma

format_profile(Profile.DOCKED, True)                              # "Docked"
format_profile(Profile.DOCKED, False)                             # "docked"
toggle_governor(GovernorConfig.ALL_ENABLED, Module.GPU, False)    # GovernorConfig.CPU_ONLY

default_config_value(ConfigValue.CHARGING_CURRENT_LIMIT)          # 2000
is_valid_config_value(ConfigValue.CHARGING_LIMIT_PERCENTAGE, 10)  # False

result_code(ErrorCode.CONFIG_NOT_LOADED)                          # 900
bq24193_raw_to_ma(bq24193_ma_to_raw(2000))                        # 2048
```

`SysClkClient` is a context manager. It closes its transport when the
`with` block ends, and after that it refuses further requests with
`RuntimeError`:

```python
from sysclk.ipc import SysClkClient

with SysClkClient(my_transport) as client:
    context = client.get_current_context()
    client.remove_override(context.profile and 0)
```

## What this package does not do

It does not include an I2C bus driver or a connection to the running clock
service. You must provide an `I2cBus` and a `Transport` yourself. It has no
command-line program, it does not run the service's own clock management,
and it does not read or write configuration files.