"""Charger and battery information of the power state manager."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag


class ChargeInfoPDC(IntEnum):
    """Power Delivery controller state."""

    NEW_PDO = 1
    NO_PD = 2
    ACCEPTED_RDO = 3


class PowerRole(IntEnum):
    """Whether the console draws or supplies power."""

    SINK = 1
    SOURCE = 2


class ChargerType(IntEnum):
    """Kind of charger that is connected."""

    NONE = 0
    PD = 1
    TYPE_C_1500MA = 2
    TYPE_C_3000MA = 3
    DCP = 4
    CDP = 5
    SDP = 6
    APPLE_500MA = 7
    APPLE_1000MA = 8
    APPLE_2000MA = 9


class ChargeInfoFlags(IntFlag):
    """Charge information flags."""

    NO_HUB = 1 << 0
    RAIL = 1 << 8
    SPDSRC = 1 << 12
    ACC = 1 << 16


class BatteryState(IntEnum):
    """Charging state of the battery."""

    DISCHARGING = 0
    CHARGING_PAUSED = 1
    FAST_CHARGING = 2


_POWER_ROLE_NAMES = {
    PowerRole.SINK: "Sink",
    PowerRole.SOURCE: "Source",
}

_CHARGER_TYPE_NAMES = {
    ChargerType.NONE: "None",
    ChargerType.PD: "USB-C PD",
    ChargerType.TYPE_C_1500MA: "USB-C",
    ChargerType.TYPE_C_3000MA: "USB-C",
    ChargerType.DCP: "USB DCP",
    ChargerType.CDP: "USB CDP",
    ChargerType.SDP: "USB SDP",
    ChargerType.APPLE_500MA: "Apple",
    ChargerType.APPLE_1000MA: "Apple",
    ChargerType.APPLE_2000MA: "Apple",
}

_STATE_ICONS = {
    BatteryState.DISCHARGING: "\u25c0",
    BatteryState.CHARGING_PAUSED: "| |",
    BatteryState.FAST_CHARGING: "\u25b6",
}


def power_role_to_str(role: PowerRole | int) -> str:
    """Display name of a power role."""
    return _POWER_ROLE_NAMES.get(role, "Unknown")


def charger_type_to_str(charger_type: ChargerType | int) -> str:
    """Display name of a charger type."""
    return _CHARGER_TYPE_NAMES.get(charger_type, "Unknown")


@dataclass
class ChargeInfo:
    """Battery and charger state; currents in mA, voltages in mV."""

    input_current_limit: int = 0
    vbus_current_limit: int = 0
    charge_current_limit: int = 0
    charge_voltage_limit: int = 0
    unk_x10: int = 0
    unk_x14: int = 0
    pdc_state: ChargeInfoPDC | int = ChargeInfoPDC.NO_PD
    battery_temperature: int = 0  # milli-degrees Celsius
    raw_battery_charge: int = 0  # per cent-mille
    voltage_avg: int = 0
    battery_age: int = 0  # per cent-mille
    power_role: PowerRole | int = PowerRole.SINK
    charger_type: ChargerType | int = ChargerType.NONE
    charger_voltage_limit: int = 0
    charger_current_limit: int = 0
    flags: ChargeInfoFlags | int = ChargeInfoFlags(0)

    def is_charger_connected(self) -> bool:
        """Tell whether any charger is plugged in."""
        return self.charger_type != ChargerType.NONE

    def is_charging(self) -> bool:
        """Tell whether the battery is actually being charged."""
        return self.is_charger_connected() and bool((self.unk_x14 >> 8) & 1)

    def battery_state(self) -> BatteryState:
        """Current charging state of the battery."""
        if not self.is_charger_connected():
            return BatteryState.DISCHARGING
        if not self.is_charging():
            return BatteryState.CHARGING_PAUSED
        return BatteryState.FAST_CHARGING

    def battery_state_icon(self) -> str:
        """Short symbol for the charging state."""
        return _STATE_ICONS.get(self.battery_state(), "?")