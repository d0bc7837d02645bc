"""Clock profiles, modules, sensors and governor settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

FREQ_TABLE_MAX_ENTRY_COUNT = 31
GLOBAL_PROFILE_TID = 0xA111111111111111

GOVERNOR_CPU_SHIFT = 0
GOVERNOR_GPU_SHIFT = 1


class Profile(IntEnum):
    """Power profile the console is running under."""

    HANDHELD = 0
    HANDHELD_CHARGING = 1
    HANDHELD_CHARGING_USB = 2
    HANDHELD_CHARGING_OFFICIAL = 3
    DOCKED = 4


class Module(IntEnum):
    """Clocked hardware module."""

    CPU = 0
    GPU = 1
    MEM = 2


class ThermalSensor(IntEnum):
    """Temperature sensor."""

    SOC = 0
    PCB = 1
    SKIN = 2


class ReverseNXMode(IntEnum):
    """Mode reported by the ReverseNX tool."""

    SYSTEM_DEFAULT = 0
    NOT_FOUND = 0
    HANDHELD = 1
    DOCKED = 2


class GovernorConfig(IntEnum):
    """Which modules have the frequency governor enabled."""

    ALL_DISABLED = 0
    CPU_ONLY = 1 << GOVERNOR_CPU_SHIFT
    CPU = 1 << GOVERNOR_CPU_SHIFT
    GPU_ONLY = 1 << GOVERNOR_GPU_SHIFT
    GPU = 1 << GOVERNOR_GPU_SHIFT
    ALL_ENABLED = 3
    DEFAULT = 3
    MASK = 3


_MODULE_SHIFTS = {
    Module.CPU: GOVERNOR_CPU_SHIFT,
    Module.GPU: GOVERNOR_GPU_SHIFT,
}


def get_governor_enabled(config: int, module: Module | int | None) -> bool:
    """Tell whether the governor is on for a module, or for any module when module is None."""
    config = int(config)
    if module is None:
        return config != GovernorConfig.ALL_DISABLED
    module = Module(module)
    if module is Module.MEM:
        return False
    return bool((config >> _MODULE_SHIFTS[module]) & 1)


def toggle_governor(prev: int, module: Module | int | None, state: bool) -> GovernorConfig:
    """Return the configuration with the governor for a module switched on or off.

    With module None every module is switched at once.
    """
    if module is None:
        return GovernorConfig.ALL_ENABLED if state else GovernorConfig.ALL_DISABLED
    module = Module(module)
    if module is Module.MEM:
        return GovernorConfig(prev)
    shift = _MODULE_SHIFTS[module]
    return GovernorConfig((int(prev) & ~(1 << shift)) | (int(bool(state)) << shift))


_MODULE_NAMES = {
    Module.CPU: ("CPU", "cpu"),
    Module.GPU: ("GPU", "gpu"),
    Module.MEM: ("Memory", "mem"),
}

_SENSOR_NAMES = {
    ThermalSensor.SOC: ("SOC", "soc"),
    ThermalSensor.PCB: ("PCB", "pcb"),
    ThermalSensor.SKIN: ("Skin", "skin"),
}

_PROFILE_NAMES = {
    Profile.DOCKED: ("Docked", "docked"),
    Profile.HANDHELD: ("Handheld", "handheld"),
    Profile.HANDHELD_CHARGING: ("Charging", "handheld_charging"),
    Profile.HANDHELD_CHARGING_USB: ("USB Charger", "handheld_charging_usb"),
    Profile.HANDHELD_CHARGING_OFFICIAL: ("Official Charger", "handheld_charging_official"),
}


def _pick(names: tuple[str, str], pretty: bool) -> str:
    return names[0] if pretty else names[1]


def format_module(module: Module | int, pretty: bool) -> str:
    """Name of a module, for display or for configuration keys."""
    return _pick(_MODULE_NAMES[Module(module)], pretty)


def format_thermal_sensor(sensor: ThermalSensor | int, pretty: bool) -> str:
    """Name of a thermal sensor, for display or for configuration keys."""
    return _pick(_SENSOR_NAMES[ThermalSensor(sensor)], pretty)


def format_profile(profile: Profile | int, pretty: bool) -> str:
    """Name of a profile, for display or for configuration keys."""
    return _pick(_PROFILE_NAMES[Profile(profile)], pretty)


def _zeros(count: int) -> list[int]:
    return [0] * count


@dataclass
class Context:
    """Current state of the clock service."""

    enabled: bool = False
    application_id: int = 0
    profile: Profile = Profile.HANDHELD
    freqs: list[int] = field(default_factory=lambda: _zeros(len(Module)))
    override_freqs: list[int] = field(default_factory=lambda: _zeros(len(Module)))
    temps: list[int] = field(default_factory=lambda: _zeros(len(ThermalSensor)))
    perf_conf_id: int = 0


@dataclass
class OcExtra:
    """Extra overclocking state."""

    system_core_boost_cpu: bool = False
    battery_charging_disabled_override: bool = False
    real_profile: Profile = Profile.HANDHELD


@dataclass
class FrequencyTable:
    """Available frequencies of a module, zero-padded to a fixed size."""

    freqs: list[int] = field(default_factory=lambda: _zeros(FREQ_TABLE_MAX_ENTRY_COUNT))

    def __post_init__(self) -> None:
        freqs = list(self.freqs)
        if len(freqs) > FREQ_TABLE_MAX_ENTRY_COUNT:
            raise ValueError(
                f"frequency table holds at most {FREQ_TABLE_MAX_ENTRY_COUNT} entries"
            )
        self.freqs = freqs + _zeros(FREQ_TABLE_MAX_ENTRY_COUNT - len(freqs))


_MHZ_COUNT = len(Profile) * len(Module)


@dataclass
class TitleProfileList:
    """Per-profile, per-module frequencies (MHz) for a title."""

    mhz: list[int] = field(default_factory=lambda: _zeros(_MHZ_COUNT))
    governor_config: GovernorConfig = GovernorConfig.DEFAULT

    def __post_init__(self) -> None:
        mhz = list(self.mhz)
        if len(mhz) != _MHZ_COUNT:
            raise ValueError(f"expected {_MHZ_COUNT} frequencies, got {len(mhz)}")
        self.mhz = mhz
        self.governor_config = GovernorConfig(self.governor_config)

    @staticmethod
    def _index(profile: Profile | int, module: Module | int) -> int:
        return int(Profile(profile)) * len(Module) + int(Module(module))

    def get_mhz(self, profile: Profile | int, module: Module | int) -> int:
        """Frequency set for a profile and module, 0 when unset."""
        return self.mhz[self._index(profile, module)]

    def set_mhz(self, profile: Profile | int, module: Module | int, mhz: int) -> None:
        """Set the frequency for a profile and module."""
        self.mhz[self._index(profile, module)] = mhz