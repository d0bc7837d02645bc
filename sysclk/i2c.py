"""Register access to the power-management chips on the I2C bus."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Callable

MAX17050_CURRENT_REG = 0x0A

MA_RANGE_MIN = 512
MA_RANGE_MAX = 4544

BQ24193_CHARGE_CURRENT_CONTROL_REG = 0x2

_U32_MASK = 0xFFFFFFFF
_POR_RETRIES = 5
_READ_SETTLE_S = 1e-6
_RAMP_DELAY_S = 5e-3


class I2cDevice(Enum):
    """Devices on the I2C bus that this module talks to."""

    MAX77620_PMIC = auto()
    MAX77621_CPU = auto()
    MAX77621_GPU = auto()
    BQ24193 = auto()
    MAX17050 = auto()
    MAX77812_2 = auto()


class BuckConverterReg(IntEnum):
    """Voltage registers of the buck converters."""

    MAX77620_SD1VOLT = 0x17
    MAX77621_VOLT = 0x00
    MAX77812_CPUVOLT = 0x26
    MAX77812_GPUVOLT = 0x23
    MAX77812_MEMVOLT = 0x25


class I2cError(Exception):
    """A failed I2C transaction, or a write that did not take effect."""

    def __init__(self, result: int, message: str | None = None) -> None:
        self.result = result
        super().__init__(message or f"I2C transaction failed with result {result:#x}")


class I2cBus(ABC):
    """Raw transfers to devices on the bus; failures raise I2cError."""

    @abstractmethod
    def send(self, device: I2cDevice, data: bytes) -> None:
        """Write data to a device."""

    @abstractmethod
    def receive(self, device: I2cDevice, size: int) -> bytes:
        """Read size bytes from a device."""


def _check_byte(name: str, value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must fit in one byte, got {value}")
    return value


def set_u8(bus: I2cBus, device: I2cDevice, reg: int, value: int) -> None:
    """Write one byte to a register."""
    bus.send(device, bytes((_check_byte("register", reg), _check_byte("value", value))))


def _read(bus: I2cBus, device: I2cDevice, reg: int, size: int) -> int:
    bus.send(device, bytes((_check_byte("register", reg),)))
    data = bus.receive(device, size)
    if len(data) != size:
        raise I2cError(-1, f"expected {size} bytes from {device.name}, got {len(data)}")
    return int.from_bytes(data, "little")


def read_u8(bus: I2cBus, device: I2cDevice, reg: int) -> int:
    """Read one byte from a register."""
    return _read(bus, device, reg, 1)


def read_u16(bus: I2cBus, device: I2cDevice, reg: int) -> int:
    """Read a little-endian 16-bit value from a register."""
    return _read(bus, device, reg, 2)


def max17050_battery_current(bus: I2cBus) -> float:
    """Battery current reported by the fuel gauge in mA; 0.0 if it cannot be read."""
    try:
        raw = read_u16(bus, I2cDevice.MAX17050, MAX17050_CURRENT_REG)
    except I2cError:
        return 0.0
    signed = raw - 0x10000 if raw & 0x8000 else raw
    sense_resistor = 5.0
    c_gain = 1.99993
    return signed * (1.5625 / (sense_resistor * c_gain))


@dataclass(frozen=True)
class BuckConverterDomain:
    """A voltage rail driven by a buck converter register."""

    device: I2cDevice
    reg: BuckConverterReg
    volt_mask: int
    uv_step: int
    uv_min: int
    uv_max: int
    por_val: int = 0

    def multiplier_to_mv(self, multiplier: int) -> int:
        """Output voltage in mV for a register multiplier."""
        return ((self.uv_min + self.uv_step * multiplier) & _U32_MASK) // 1000

    def mv_to_multiplier(self, mvolt: int) -> int:
        """Register multiplier for an output voltage in mV, clamped to the rail's range."""
        uvolt = (mvolt * 1000) & _U32_MASK
        uvolt = min(max(uvolt, self.uv_min), self.uv_max)
        return ((uvolt - self.uv_min) // self.uv_step) & 0xFF


ERISTA_CPU = BuckConverterDomain(
    I2cDevice.MAX77621_CPU, BuckConverterReg.MAX77621_VOLT, 0x7F, 6250, 606250, 1400000
)
ERISTA_GPU = BuckConverterDomain(
    I2cDevice.MAX77621_GPU, BuckConverterReg.MAX77621_VOLT, 0x7F, 6250, 606250, 1400000
)
ERISTA_DRAM = BuckConverterDomain(
    I2cDevice.MAX77620_PMIC, BuckConverterReg.MAX77620_SD1VOLT, 0x7F, 12500, 600000, 1250000
)
MARIKO_CPU = BuckConverterDomain(
    I2cDevice.MAX77812_2, BuckConverterReg.MAX77812_CPUVOLT, 0xFF, 5000, 250000, 1525000, 0x78
)
MARIKO_GPU = BuckConverterDomain(
    I2cDevice.MAX77812_2, BuckConverterReg.MAX77812_GPUVOLT, 0xFF, 5000, 250000, 1525000, 0x78
)
MARIKO_DRAM_VDDQ = BuckConverterDomain(
    I2cDevice.MAX77812_2, BuckConverterReg.MAX77812_MEMVOLT, 0xFF, 5000, 250000, 650000, 0x78
)
MARIKO_DRAM_VDD2 = BuckConverterDomain(
    I2cDevice.MAX77620_PMIC, BuckConverterReg.MAX77620_SD1VOLT, 0x7F, 12500, 600000, 1250000
)


def get_mv_out(
    bus: I2cBus,
    domain: BuckConverterDomain,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Current output voltage of a rail in mV; 0 if the register cannot be read.

    A read that returns the power-on-reset value is retried a few times.
    """
    value = 0
    for _ in range(_POR_RETRIES):
        try:
            value = read_u8(bus, domain.device, domain.reg)
        except I2cError:
            return 0
        sleep(_READ_SETTLE_S)
        if not domain.por_val or value != domain.por_val:
            break
    return domain.multiplier_to_mv(value & domain.volt_mask)


def set_mv_out(
    bus: I2cBus,
    domain: BuckConverterDomain,
    mvolt: int,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Set the output voltage of a rail and check that the register took it."""
    value = read_u8(bus, domain.device, domain.reg)
    multiplier = domain.mv_to_multiplier(mvolt)
    value = (value & ~domain.volt_mask & 0xFF) | (multiplier & domain.volt_mask)
    set_u8(bus, domain.device, domain.reg, value)
    sleep(_RAMP_DELAY_S)
    written = read_u8(bus, domain.device, domain.reg)
    if written != value:
        raise I2cError(-1, f"register holds {written:#04x} after writing {value:#04x}")


def bq24193_ma_to_raw(ma: int) -> int:
    """Encode a fast-charge current limit in mA as a register value."""
    raw = 0
    ma = min(ma, MA_RANGE_MAX)
    if ma <= MA_RANGE_MIN - 64:
        ma *= 5
        raw |= 0x1
    ma -= ma % 100
    ma = (ma - (MA_RANGE_MIN - 64)) & _U32_MASK
    raw |= (ma >> 6) << 2
    return raw & 0xFF


def bq24193_raw_to_ma(raw: int) -> int:
    """Decode a fast-charge current register value into mA."""
    ma = ((raw >> 2) << 6) + MA_RANGE_MIN
    if raw & 1:
        ma = ma * 20 // 100
    return ma


def get_fast_charge_current_limit(bus: I2cBus) -> int:
    """Fast-charge current limit of the charger in mA."""
    raw = read_u8(bus, I2cDevice.BQ24193, BQ24193_CHARGE_CURRENT_CONTROL_REG)
    return bq24193_raw_to_ma(raw)


def set_fast_charge_current_limit(bus: I2cBus, ma: int) -> None:
    """Set the fast-charge current limit of the charger in mA."""
    set_u8(bus, I2cDevice.BQ24193, BQ24193_CHARGE_CURRENT_CONTROL_REG, bq24193_ma_to_raw(ma))