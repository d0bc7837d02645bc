"""Client for the clock service's request interface."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from enum import IntEnum

from sysclk.clocks import (
    FREQ_TABLE_MAX_ENTRY_COUNT,
    Context,
    FrequencyTable,
    Module,
    Profile,
    ReverseNXMode,
    ThermalSensor,
    TitleProfileList,
)
from sysclk.config import ConfigValue, ConfigValueList

API_VERSION = 2
SERVICE_NAME = "sysclkOC"


class IpcCmd(IntEnum):
    """Request command ids."""

    GET_API_VERSION = 0
    GET_VERSION_STRING = 1
    GET_CURRENT_CONTEXT = 2
    EXIT = 3
    GET_PROFILE_COUNT = 4
    GET_PROFILES = 5
    SET_PROFILES = 6
    SET_ENABLED = 7
    SET_OVERRIDE = 8
    GET_CONFIG_VALUES = 9
    SET_CONFIG_VALUES = 10
    SET_REVERSE_NX_RT_MODE = 11
    GET_FREQUENCY_TABLE = 12
    GET_IS_MARIKO = 13
    GET_BATTERY_CHARGING_DISABLED_OVERRIDE = 14
    SET_BATTERY_CHARGING_DISABLED_OVERRIDE = 15


class IpcError(Exception):
    """A request that the service or the transport failed."""

    def __init__(self, result: int | None = None, message: str | None = None) -> None:
        self.result = result
        if message is None:
            message = "request failed" if result is None else f"request failed with {result:#x}"
        super().__init__(message)


class Transport(ABC):
    """Carries requests to the service; failures raise IpcError."""

    @abstractmethod
    def dispatch(self, cmd: IpcCmd, data: bytes, out_size: int) -> bytes:
        """Send a request with raw input data and return out_size bytes of raw output."""

    @abstractmethod
    def dispatch_out_buffer(self, cmd: IpcCmd, size: int) -> bytes:
        """Send a request that fills an output buffer of the given size."""

    def close(self) -> None:
        """Release the connection to the service."""


_NUM_MODULES = len(Module)
_NUM_SENSORS = len(ThermalSensor)
_MHZ_COUNT = len(Profile) * _NUM_MODULES

_CONTEXT = struct.Struct(f"<B7xQI{_NUM_MODULES}I{_NUM_MODULES}I{_NUM_SENSORS}II4x")
_PROFILE_LIST = struct.Struct(f"<{_MHZ_COUNT}II")
_CONFIG_VALUES = struct.Struct(f"<{len(ConfigValue)}Q")
_FREQ_TABLE = struct.Struct(f"<{FREQ_TABLE_MAX_ENTRY_COUNT}I")
_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_U32_PAIR = struct.Struct("<II")


def _unpack(layout: struct.Struct, data: bytes, what: str) -> tuple:
    if len(data) != layout.size:
        raise ValueError(f"{what} takes {layout.size} bytes, got {len(data)}")
    return layout.unpack(data)


def _pack(layout: struct.Struct, what: str, *values: int) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"cannot encode {what}: {exc}") from exc


def unpack_context(data: bytes) -> Context:
    """Decode the service's current context."""
    fields = _unpack(_CONTEXT, data, "context")
    enabled, application_id, profile = fields[:3]
    rest = list(fields[3:])
    freqs = rest[:_NUM_MODULES]
    override_freqs = rest[_NUM_MODULES : 2 * _NUM_MODULES]
    temps = rest[2 * _NUM_MODULES : 2 * _NUM_MODULES + _NUM_SENSORS]
    return Context(
        enabled=bool(enabled),
        application_id=application_id,
        profile=Profile(profile),
        freqs=freqs,
        override_freqs=override_freqs,
        temps=temps,
        perf_conf_id=rest[-1],
    )


def pack_title_profile_list(profiles: TitleProfileList) -> bytes:
    """Encode a title's profile list."""
    return _pack(_PROFILE_LIST, "profile list", *profiles.mhz, int(profiles.governor_config))


def unpack_title_profile_list(data: bytes) -> TitleProfileList:
    """Decode a title's profile list."""
    fields = _unpack(_PROFILE_LIST, data, "profile list")
    return TitleProfileList(mhz=list(fields[:_MHZ_COUNT]), governor_config=fields[_MHZ_COUNT])


def pack_config_values(values: ConfigValueList) -> bytes:
    """Encode the configuration values."""
    return _pack(_CONFIG_VALUES, "configuration values", *values.values)


def unpack_config_values(data: bytes) -> ConfigValueList:
    """Decode the configuration values."""
    return ConfigValueList(values=list(_unpack(_CONFIG_VALUES, data, "configuration values")))


def unpack_frequency_table(data: bytes) -> FrequencyTable:
    """Decode a frequency table."""
    return FrequencyTable(freqs=list(_unpack(_FREQ_TABLE, data, "frequency table")))


class SysClkClient:
    """Requests to the clock service over a transport."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._closed = False

    def close(self) -> None:
        """Close the transport; further requests are refused."""
        if not self._closed:
            self._closed = True
            self._transport.close()

    def __enter__(self) -> SysClkClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("client is closed")

    def _call(self, cmd: IpcCmd, data: bytes = b"", out_size: int = 0) -> bytes:
        self._ensure_open()
        out = self._transport.dispatch(cmd, data, out_size)
        if len(out) < out_size:
            raise IpcError(
                message=f"{cmd.name} returned {len(out)} bytes, expected {out_size}"
            )
        return bytes(out[:out_size])

    def get_api_version(self) -> int:
        """Interface version spoken by the service."""
        return _U32.unpack(self._call(IpcCmd.GET_API_VERSION, out_size=_U32.size))[0]

    def get_version_string(self, length: int) -> str:
        """Version string of the service, read into a buffer of the given length."""
        self._ensure_open()
        buffer = self._transport.dispatch_out_buffer(IpcCmd.GET_VERSION_STRING, length)
        return bytes(buffer[:length]).split(b"\0", 1)[0].decode("utf-8", errors="replace")

    def get_current_context(self) -> Context:
        """Current state of the service."""
        return unpack_context(self._call(IpcCmd.GET_CURRENT_CONTEXT, out_size=_CONTEXT.size))

    def get_profile_count(self, tid: int) -> int:
        """Number of profiles set for a title."""
        out = self._call(IpcCmd.GET_PROFILE_COUNT, _pack(_U64, "title id", tid), _U8.size)
        return _U8.unpack(out)[0]

    def set_enabled(self, enabled: bool) -> None:
        """Switch clock management on or off."""
        self._call(IpcCmd.SET_ENABLED, _U8.pack(int(bool(enabled))))

    def set_override(self, module: Module | int, hz: int) -> None:
        """Force a module to a frequency; 0 removes the override."""
        data = _pack(_U32_PAIR, "override", int(Module(module)), hz)
        self._call(IpcCmd.SET_OVERRIDE, data)

    def remove_override(self, module: Module | int) -> None:
        """Remove the forced frequency of a module."""
        self.set_override(module, 0)

    def get_profiles(self, tid: int) -> TitleProfileList:
        """Profile list of a title."""
        out = self._call(IpcCmd.GET_PROFILES, _pack(_U64, "title id", tid), _PROFILE_LIST.size)
        return unpack_title_profile_list(out)

    def set_profiles(self, tid: int, profiles: TitleProfileList) -> None:
        """Replace the profile list of a title."""
        data = _pack(_U64, "title id", tid) + pack_title_profile_list(profiles)
        self._call(IpcCmd.SET_PROFILES, data)

    def get_config_values(self) -> ConfigValueList:
        """Current configuration values."""
        out = self._call(IpcCmd.GET_CONFIG_VALUES, out_size=_CONFIG_VALUES.size)
        return unpack_config_values(out)

    def set_config_values(self, values: ConfigValueList) -> None:
        """Replace the configuration values."""
        self._call(IpcCmd.SET_CONFIG_VALUES, pack_config_values(values))

    def set_reverse_nx_rt_mode(self, mode: ReverseNXMode | int) -> None:
        """Tell the service which mode ReverseNX selected at run time."""
        self._call(IpcCmd.SET_REVERSE_NX_RT_MODE, _U32.pack(int(ReverseNXMode(mode))))

    def get_frequency_table(self, module: Module | int, profile: Profile | int) -> FrequencyTable:
        """Frequencies available to a module under a profile."""
        data = _U32_PAIR.pack(int(Module(module)), int(Profile(profile)))
        out = self._call(IpcCmd.GET_FREQUENCY_TABLE, data, _FREQ_TABLE.size)
        return unpack_frequency_table(out)

    def get_is_mariko(self) -> bool:
        """Tell whether the console is a Mariko model."""
        return bool(self._call(IpcCmd.GET_IS_MARIKO, out_size=1)[0])

    def get_battery_charging_disabled_override(self) -> bool:
        """Tell whether battery charging is forced off."""
        return bool(self._call(IpcCmd.GET_BATTERY_CHARGING_DISABLED_OVERRIDE, out_size=1)[0])

    def set_battery_charging_disabled_override(self, value: bool) -> None:
        """Force battery charging off, or lift that."""
        self._call(IpcCmd.SET_BATTERY_CHARGING_DISABLED_OVERRIDE, _U8.pack(int(bool(value))))