import pytest

from sysclk.config import (
    CHARGING_CURRENT_MA_LIMIT,
    ConfigValue,
    ConfigValueList,
    default_config_value,
    format_config_value,
    is_valid_config_value,
)


@pytest.mark.parametrize(
    "key, name",
    [
        (ConfigValue.POLLING_INTERVAL_MS, "poll_interval_ms"),
        (ConfigValue.TEMP_LOG_INTERVAL_MS, "temp_log_interval_ms"),
        (ConfigValue.CSV_WRITE_INTERVAL_MS, "csv_write_interval_ms"),
        (ConfigValue.AUTO_CPU_BOOST, "auto_cpu_boost"),
        (ConfigValue.SYNC_REVERSE_NX_MODE, "sync_reversenx_mode"),
        (ConfigValue.ALLOW_UNSAFE_FREQUENCIES, "allow_unsafe_freq"),
        (ConfigValue.CHARGING_CURRENT_LIMIT, "charging_current"),
        (ConfigValue.CHARGING_LIMIT_PERCENTAGE, "charging_limit_perc"),
        (ConfigValue.GOVERNOR_EXPERIMENTAL, "governor_experimental"),
    ],
)
def test_config_keys(key, name):
    assert format_config_value(key, False) == name


def test_pretty_names():
    assert format_config_value(ConfigValue.POLLING_INTERVAL_MS, True) == "Polling Interval (ms)"
    assert format_config_value(ConfigValue.AUTO_CPU_BOOST, True) == "Auto CPU Boost"


def test_names_are_unique():
    keys = [format_config_value(k, False) for k in ConfigValue]
    assert len(set(keys)) == len(ConfigValue)


def test_defaults():
    assert default_config_value(ConfigValue.POLLING_INTERVAL_MS) == 500
    assert default_config_value(ConfigValue.CHARGING_CURRENT_LIMIT) == 2000
    assert default_config_value(ConfigValue.SYNC_REVERSE_NX_MODE) == 1


@pytest.mark.parametrize("key", list(ConfigValue))
def test_defaults_are_valid(key):
    assert is_valid_config_value(key, default_config_value(key)) is True


def test_polling_interval_validity():
    assert is_valid_config_value(ConfigValue.POLLING_INTERVAL_MS, 0) is False
    assert is_valid_config_value(ConfigValue.POLLING_INTERVAL_MS, 1) is True


@pytest.mark.parametrize("raw, valid", [(0, True), (1, True), (2, False), (3, False)])
def test_boolean_validity(raw, valid):
    assert is_valid_config_value(ConfigValue.AUTO_CPU_BOOST, raw) is valid


@pytest.mark.parametrize(
    "raw, valid",
    [(0, False), (100, True), (150, False), (CHARGING_CURRENT_MA_LIMIT, True),
     (CHARGING_CURRENT_MA_LIMIT + 100, False)],
)
def test_charging_current_validity(raw, valid):
    assert is_valid_config_value(ConfigValue.CHARGING_CURRENT_LIMIT, raw) is valid


@pytest.mark.parametrize("raw, valid", [(19, False), (20, True), (100, True), (101, False)])
def test_charging_percentage_validity(raw, valid):
    assert is_valid_config_value(ConfigValue.CHARGING_LIMIT_PERCENTAGE, raw) is valid


def test_value_list_starts_with_defaults():
    values = ConfigValueList()
    assert [values.get(k) for k in ConfigValue] == [default_config_value(k) for k in ConfigValue]


def test_value_list_set_get():
    values = ConfigValueList()
    values.set(ConfigValue.CHARGING_LIMIT_PERCENTAGE, 80)
    assert values.get(ConfigValue.CHARGING_LIMIT_PERCENTAGE) == 80


def test_value_list_rejects_invalid():
    values = ConfigValueList()
    with pytest.raises(ValueError):
        values.set(ConfigValue.AUTO_CPU_BOOST, 2)
    assert values.get(ConfigValue.AUTO_CPU_BOOST) == default_config_value(ConfigValue.AUTO_CPU_BOOST)


def test_value_list_rejects_negative():
    with pytest.raises(ValueError):
        ConfigValueList().set(ConfigValue.TEMP_LOG_INTERVAL_MS, -1)


def test_value_list_wrong_size():
    with pytest.raises(ValueError):
        ConfigValueList(values=[1, 2])