"""Known APM performance configurations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ApmConfiguration:
    """CPU, GPU and memory clocks of one performance configuration."""

    id: int
    cpu_hz: int
    gpu_hz: int
    mem_hz: int


APM_CONFIGURATIONS: tuple[ApmConfiguration, ...] = (
    ApmConfiguration(0x00010000, 1020000000, 384000000, 1600000000),
    ApmConfiguration(0x00010001, 1020000000, 768000000, 1600000000),
    ApmConfiguration(0x00010002, 1224000000, 691200000, 1600000000),
    ApmConfiguration(0x00020000, 1020000000, 230400000, 1600000000),
    ApmConfiguration(0x00020001, 1020000000, 307200000, 1600000000),
    ApmConfiguration(0x00020002, 1224000000, 230400000, 1600000000),
    ApmConfiguration(0x00020003, 1020000000, 307000000, 1331200000),
    ApmConfiguration(0x00020004, 1020000000, 384000000, 1331200000),
    ApmConfiguration(0x00020005, 1020000000, 307200000, 1065600000),
    ApmConfiguration(0x00020006, 1020000000, 384000000, 1065600000),
    ApmConfiguration(0x92220007, 1020000000, 460800000, 1600000000),
    ApmConfiguration(0x92220008, 1020000000, 460800000, 1331200000),
    ApmConfiguration(0x92220009, 1785000000, 76800000, 1600000000),
    ApmConfiguration(0x9222000A, 1785000000, 76800000, 1331200000),
    ApmConfiguration(0x9222000B, 1020000000, 76800000, 1600000000),
    ApmConfiguration(0x9222000C, 1020000000, 76800000, 1331200000),
)

_BY_ID = {config.id: config for config in APM_CONFIGURATIONS}


def find_apm_configuration(config_id: int) -> ApmConfiguration | None:
    """Configuration with the given id, or None if it is not known."""
    return _BY_ID.get(config_id)