"""Service configuration values, their names, defaults and validity."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

CHARGING_CURRENT_MA_LIMIT = 3000

_U64_MAX = (1 << 64) - 1


class ConfigValue(IntEnum):
    """Configuration keys."""

    POLLING_INTERVAL_MS = 0
    TEMP_LOG_INTERVAL_MS = 1
    CSV_WRITE_INTERVAL_MS = 2
    AUTO_CPU_BOOST = 3
    SYNC_REVERSE_NX_MODE = 4
    ALLOW_UNSAFE_FREQUENCIES = 5
    CHARGING_CURRENT_LIMIT = 6
    CHARGING_LIMIT_PERCENTAGE = 7
    GOVERNOR_EXPERIMENTAL = 8


_NAMES = {
    ConfigValue.POLLING_INTERVAL_MS: ("Polling Interval (ms)", "poll_interval_ms"),
    ConfigValue.TEMP_LOG_INTERVAL_MS: (
        "Temperature logging interval (ms)",
        "temp_log_interval_ms",
    ),
    ConfigValue.CSV_WRITE_INTERVAL_MS: ("CSV write interval (ms)", "csv_write_interval_ms"),
    ConfigValue.AUTO_CPU_BOOST: ("Auto CPU Boost", "auto_cpu_boost"),
    ConfigValue.SYNC_REVERSE_NX_MODE: ("Sync ReverseNX Mode Sync", "sync_reversenx_mode"),
    ConfigValue.ALLOW_UNSAFE_FREQUENCIES: ("Allow Unsafe Frequencies", "allow_unsafe_freq"),
    ConfigValue.CHARGING_CURRENT_LIMIT: ("Charging Current Limit (mA)", "charging_current"),
    ConfigValue.CHARGING_LIMIT_PERCENTAGE: ("Charging Limit (%)", "charging_limit_perc"),
    ConfigValue.GOVERNOR_EXPERIMENTAL: (
        "Frequency Governor (Experimental)",
        "governor_experimental",
    ),
}

_DEFAULTS = {
    ConfigValue.POLLING_INTERVAL_MS: 500,
    ConfigValue.TEMP_LOG_INTERVAL_MS: 0,
    ConfigValue.CSV_WRITE_INTERVAL_MS: 0,
    ConfigValue.AUTO_CPU_BOOST: 0,
    ConfigValue.SYNC_REVERSE_NX_MODE: 1,
    ConfigValue.ALLOW_UNSAFE_FREQUENCIES: 0,
    ConfigValue.CHARGING_CURRENT_LIMIT: 2000,
    ConfigValue.CHARGING_LIMIT_PERCENTAGE: 100,
    ConfigValue.GOVERNOR_EXPERIMENTAL: 0,
}

_BOOLEAN_VALUES = frozenset(
    {
        ConfigValue.AUTO_CPU_BOOST,
        ConfigValue.SYNC_REVERSE_NX_MODE,
        ConfigValue.ALLOW_UNSAFE_FREQUENCIES,
        ConfigValue.GOVERNOR_EXPERIMENTAL,
    }
)


def format_config_value(value: ConfigValue | int, pretty: bool) -> str:
    """Name of a configuration key, for display or for the configuration file."""
    pretty_name, key = _NAMES[ConfigValue(value)]
    return pretty_name if pretty else key


def default_config_value(value: ConfigValue | int) -> int:
    """Default setting of a configuration key."""
    return _DEFAULTS[ConfigValue(value)]


def is_valid_config_value(value: ConfigValue | int, raw: int) -> bool:
    """Tell whether raw is an acceptable setting for a configuration key."""
    key = ConfigValue(value)
    if key is ConfigValue.POLLING_INTERVAL_MS:
        return raw > 0
    if key in (ConfigValue.TEMP_LOG_INTERVAL_MS, ConfigValue.CSV_WRITE_INTERVAL_MS):
        return True
    if key in _BOOLEAN_VALUES:
        return (raw & 0x1) == raw
    if key is ConfigValue.CHARGING_CURRENT_LIMIT:
        return 100 <= raw <= CHARGING_CURRENT_MA_LIMIT and raw % 100 == 0
    if key is ConfigValue.CHARGING_LIMIT_PERCENTAGE:
        return 20 <= raw <= 100
    return False


@dataclass
class ConfigValueList:
    """One setting for every configuration key, starting from the defaults."""

    values: list[int] = field(
        default_factory=lambda: [default_config_value(key) for key in ConfigValue]
    )

    def __post_init__(self) -> None:
        values = list(self.values)
        if len(values) != len(ConfigValue):
            raise ValueError(f"expected {len(ConfigValue)} values, got {len(values)}")
        self.values = values

    def get(self, key: ConfigValue | int) -> int:
        """Current setting of a key."""
        return self.values[ConfigValue(key)]

    def set(self, key: ConfigValue | int, raw: int) -> None:
        """Change the setting of a key; raise ValueError if it is not acceptable."""
        key = ConfigValue(key)
        if not 0 <= raw <= _U64_MAX or not is_valid_config_value(key, raw):
            raise ValueError(f"invalid value {raw} for {format_config_value(key, False)}")
        self.values[key] = raw