import struct

import pytest

from sysclk.clocks import (
    GLOBAL_PROFILE_TID,
    Context,
    FrequencyTable,
    GovernorConfig,
    Module,
    Profile,
    ReverseNXMode,
    TitleProfileList,
)
from sysclk.config import ConfigValue, ConfigValueList
from sysclk.ipc import (
    API_VERSION,
    IpcCmd,
    IpcError,
    SysClkClient,
    Transport,
    pack_config_values,
    pack_title_profile_list,
    unpack_config_values,
    unpack_context,
    unpack_frequency_table,
    unpack_title_profile_list,
)


class FakeTransport(Transport):
    def __init__(self, responses=None, buffer=b"", fail_result=None):
        self.responses = responses or {}
        self.buffer = buffer
        self.fail_result = fail_result
        self.calls = []
        self.closed = 0

    def dispatch(self, cmd, data, out_size):
        if self.fail_result is not None:
            raise IpcError(self.fail_result)
        self.calls.append((cmd, bytes(data), out_size))
        return self.responses.get(cmd, bytes(out_size))

    def dispatch_out_buffer(self, cmd, size):
        self.calls.append((cmd, b"", size))
        return self.buffer.ljust(size, b"\0")[:size]

    def close(self):
        self.closed += 1


def make_profiles():
    profiles = TitleProfileList(governor_config=GovernorConfig.CPU)
    profiles.set_mhz(Profile.DOCKED, Module.GPU, 768)
    profiles.set_mhz(Profile.HANDHELD, Module.CPU, 1020)
    return profiles


def test_api_version():
    transport = FakeTransport({IpcCmd.GET_API_VERSION: b"\x02\x00\x00\x00"})
    assert SysClkClient(transport).get_api_version() == API_VERSION


def test_version_string_stops_at_nul():
    transport = FakeTransport(buffer=b"1.0\x00junk")
    assert SysClkClient(transport).get_version_string(32) == "1.0"
    assert transport.calls == [(IpcCmd.GET_VERSION_STRING, b"", 32)]


def test_current_context():
    raw = struct.pack(
        "<B7xQI3I3I3II4x", 1, GLOBAL_PROFILE_TID, int(Profile.DOCKED),
        1020, 768, 1600, 0, 921, 0, 40, 35, 30, 0x00020002,
    )
    ctx = SysClkClient(FakeTransport({IpcCmd.GET_CURRENT_CONTEXT: raw})).get_current_context()
    assert ctx == Context(
        enabled=True,
        application_id=GLOBAL_PROFILE_TID,
        profile=Profile.DOCKED,
        freqs=[1020, 768, 1600],
        override_freqs=[0, 921, 0],
        temps=[40, 35, 30],
        perf_conf_id=0x00020002,
    )


def test_unpack_context_rejects_wrong_size():
    with pytest.raises(ValueError):
        unpack_context(bytes(10))


def test_profile_count_sends_title_id():
    transport = FakeTransport({IpcCmd.GET_PROFILE_COUNT: b"\x05"})
    assert SysClkClient(transport).get_profile_count(GLOBAL_PROFILE_TID) == 5
    cmd, data, _ = transport.calls[0]
    assert cmd == IpcCmd.GET_PROFILE_COUNT
    assert data == struct.pack("<Q", GLOBAL_PROFILE_TID)


def test_set_enabled_wire_byte():
    transport = FakeTransport()
    SysClkClient(transport).set_enabled(True)
    assert transport.calls == [(IpcCmd.SET_ENABLED, b"\x01", 0)]


def test_remove_override_wire_bytes():
    transport = FakeTransport()
    SysClkClient(transport).remove_override(Module.GPU)
    assert transport.calls == [
        (IpcCmd.SET_OVERRIDE, b"\x01\x00\x00\x00\x00\x00\x00\x00", 0)
    ]


def test_profile_list_round_trip():
    profiles = make_profiles()
    assert unpack_title_profile_list(pack_title_profile_list(profiles)) == profiles


def test_set_profiles_payload():
    transport = FakeTransport()
    profiles = make_profiles()
    SysClkClient(transport).set_profiles(GLOBAL_PROFILE_TID, profiles)
    cmd, data, _ = transport.calls[0]
    assert cmd == IpcCmd.SET_PROFILES
    assert struct.unpack("<Q", data[:8])[0] == GLOBAL_PROFILE_TID
    assert unpack_title_profile_list(data[8:]) == profiles


def test_get_profiles():
    profiles = make_profiles()
    transport = FakeTransport({IpcCmd.GET_PROFILES: pack_title_profile_list(profiles)})
    assert SysClkClient(transport).get_profiles(GLOBAL_PROFILE_TID) == profiles


def test_config_values_round_trip_through_client():
    values = ConfigValueList()
    values.set(ConfigValue.CHARGING_CURRENT_LIMIT, 1500)
    transport = FakeTransport()
    client = SysClkClient(transport)
    client.set_config_values(values)
    sent = transport.calls[0][1]
    transport.responses[IpcCmd.GET_CONFIG_VALUES] = sent
    assert client.get_config_values() == values
    assert unpack_config_values(pack_config_values(values)) == values


def test_pack_config_values_rejects_negative():
    values = ConfigValueList()
    values.values[0] = -1
    with pytest.raises(ValueError):
        pack_config_values(values)


def test_reverse_nx_mode_payload():
    transport = FakeTransport()
    SysClkClient(transport).set_reverse_nx_rt_mode(ReverseNXMode.DOCKED)
    assert transport.calls == [(IpcCmd.SET_REVERSE_NX_RT_MODE, b"\x02\x00\x00\x00", 0)]


def test_frequency_table():
    table = FrequencyTable([612000000, 1020000000])
    raw = struct.pack("<31I", *table.freqs)
    transport = FakeTransport({IpcCmd.GET_FREQUENCY_TABLE: raw})
    result = SysClkClient(transport).get_frequency_table(Module.CPU, Profile.DOCKED)
    assert result == table
    assert transport.calls[0][1] == struct.pack("<II", int(Module.CPU), int(Profile.DOCKED))
    with pytest.raises(ValueError):
        unpack_frequency_table(raw[:-4])


def test_boolean_queries_and_override():
    transport = FakeTransport(
        {
            IpcCmd.GET_IS_MARIKO: b"\x01",
            IpcCmd.GET_BATTERY_CHARGING_DISABLED_OVERRIDE: b"\x00",
        }
    )
    client = SysClkClient(transport)
    assert client.get_is_mariko() is True
    assert client.get_battery_charging_disabled_override() is False
    client.set_battery_charging_disabled_override(True)
    assert transport.calls[-1] == (IpcCmd.SET_BATTERY_CHARGING_DISABLED_OVERRIDE, b"\x01", 0)


def test_short_reply_raises():
    transport = FakeTransport({IpcCmd.GET_API_VERSION: b"\x02"})
    with pytest.raises(IpcError):
        SysClkClient(transport).get_api_version()


def test_transport_error_propagates():
    with pytest.raises(IpcError) as info:
        SysClkClient(FakeTransport(fail_result=0x3084)).get_is_mariko()
    assert info.value.result == 0x3084


def test_context_manager_closes_once():
    transport = FakeTransport()
    with SysClkClient(transport) as client:
        client.set_enabled(False)
    client.close()
    assert transport.closed == 1
    with pytest.raises(RuntimeError):
        client.get_api_version()