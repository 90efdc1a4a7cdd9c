from enum import Enum
from pathlib import Path
from typing import Any

import msgspec
from yaml import BaseLoader, load

from spec.common import UInt64, Version


class Network(Enum):
    MAINNET = "mainnet"
    GNOSIS = "gnosis"
    MINIMAL = "minimal"

    # Special case where the network config is loaded from the filesystem
    CUSTOM = "custom"


class SpecConfig(msgspec.Struct, frozen=True):
    PRESET_BASE: str
    CONFIG_NAME: str

    GENESIS_FORK_VERSION: Version
    SECONDS_PER_SLOT: UInt64

    MAX_COMMITTEES_PER_SLOT: UInt64
    TARGET_COMMITTEE_SIZE: UInt64
    MAX_VALIDATORS_PER_COMMITTEE: UInt64
    SLOTS_PER_EPOCH: UInt64


def parse_spec(data: dict[str, Any]) -> SpecConfig:
    # YAML values are loaded as strings, strict=False
    # lets msgspec coerce them into integers.
    # Unknown keys are ignored.
    return msgspec.convert(data, type=SpecConfig, strict=False)


def parse_yaml_file(fp: Path) -> dict[str, Any]:
    with Path.open(fp) as f:
        parsed = load(f, BaseLoader)  # noqa: S506 - trusted input, and BaseLoader is also safe
        if not isinstance(parsed, dict):
            raise TypeError(f"Expected a dict, got {type(parsed)}")
        return parsed


def get_network_spec(
    network: Network, network_custom_config_path: str | None = None
) -> SpecConfig:
    spec_dict = {}

    if network == Network.CUSTOM:
        if network_custom_config_path is None:
            raise ValueError(
                "--network-custom-config-path must be specified for `custom` network"
            )
        spec_dict.update(parse_yaml_file(Path(network_custom_config_path)))
    else:
        spec_dict.update(
            parse_yaml_file(Path(__file__).parent / f"{network.value}.yaml")
        )

    preset_base = spec_dict["PRESET_BASE"].strip("'")
    preset_files_dir = Path(__file__).parent / "presets" / preset_base
    if not preset_files_dir.is_dir():
        raise ValueError(f"Unknown preset base: {preset_base}")
    for fp in sorted(preset_files_dir.iterdir()):
        spec_dict.update(parse_yaml_file(fp))

    return parse_spec(data=spec_dict)
