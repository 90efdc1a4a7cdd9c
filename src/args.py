import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from logging import getLevelNamesMapping
from pathlib import Path

import msgspec

from identifiers import parse_block_id, parse_state_id, parse_validator_id
from observability import get_service_version
from spec.configs import Network


class CLIArgs(msgspec.Struct, kw_only=True):
    network: Network
    network_custom_config_path: str | None
    chain_snapshot_path: Path
    state_id: str
    block_id: str | None
    validator_ids: list[str]
    data_dir: Path | None
    log_level: int


def _validate_comma_separated_strings(
    input_string: str, entity_name: str, min_values_required: int = 0
) -> list[str]:
    items = [item.strip() for item in input_string.split(",") if item.strip()]
    if len(items) < min_values_required:
        raise ValueError(f"Not enough {entity_name}s provided")
    if len(items) != len(set(items)):
        raise ValueError(f"{entity_name}s must be unique: {items}")
    return items


def _canonical_identifier(parser: Callable[[str], object], input_string: str) -> str:
    # Raises IdentifierParseError (a ValueError) for malformed input
    return str(parser(input_string.strip()))


def _validate_file_path(input_string: str) -> Path:
    fp = Path(input_string)
    if not fp.is_file():
        raise ValueError(f"File does not exist: {input_string}")
    return fp


def _validate_dir_path(input_string: str | None) -> Path | None:
    if input_string is None:
        return None
    dp = Path(input_string)
    if not dp.is_dir():
        raise ValueError(f"Directory does not exist: {input_string}")
    return dp


def log_cli_arg_values(validated_args: CLIArgs) -> None:
    logger = logging.getLogger(__name__)

    for action in get_parser()._actions:  # noqa: SLF001
        if action.dest in ("help",):
            continue

        validated_arg_value = getattr(validated_args, action.dest)
        if isinstance(validated_arg_value, list):
            validated_arg_value = ",".join(validated_arg_value)
        elif isinstance(validated_arg_value, Network):
            validated_arg_value = validated_arg_value.value
        elif action.dest == "log_level":
            validated_arg_value = logging.getLevelName(validated_arg_value)

        if action.default != validated_arg_value:
            logger.info(f"{action.dest}: {validated_arg_value}")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolves block, state and validator identifiers against a chain snapshot."
    )

    parser.add_argument(
        "--network",
        type=str,
        required=False,
        default=Network.MAINNET.value,
        choices=[e.value for e in Network],
        help="The network whose preset values to use. `custom` is a special case where the network config is loaded from the file specified using `--network-custom-config-path`. Defaults to mainnet.",
    )
    parser.add_argument(
        "--network-custom-config-path",
        type=str,
        required=False,
        default=None,
        help="Path to a custom network configuration file from which to load the network specs.",
    )
    parser.add_argument(
        "--chain-snapshot-path",
        type=str,
        required=True,
        help="Path to a JSON file containing the blocks and states to query.",
    )
    parser.add_argument(
        "--state-id",
        type=str,
        required=False,
        default="head",
        help="The state to query: head, genesis, finalized, justified, a slot or a 0x-prefixed state root. Defaults to head.",
    )
    parser.add_argument(
        "--block-id",
        type=str,
        required=False,
        default=None,
        help="A block to query: head, genesis, finalized, justified, a slot or a 0x-prefixed block root.",
    )
    parser.add_argument(
        "--validator-ids",
        type=str,
        required=False,
        default="",
        help="A comma-separated list of validator indices and/or 0x-prefixed public keys to query.",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        required=False,
        default=None,
        help="A directory in which to keep a rotating debug log file. No log file is written if not provided.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=getLevelNamesMapping().keys(),
        help="The logging level to use. Defaults to INFO.",
    )
    return parser


def parse_cli_args(args: Sequence[str]) -> CLIArgs:
    if args == ["--version"]:
        print(f"beacon-query {get_service_version()}")  # noqa: T201
        sys.exit(0)

    parser = get_parser()
    parsed_args = parser.parse_args(args=args)

    try:
        network = Network(parsed_args.network)
        if network == Network.CUSTOM and parsed_args.network_custom_config_path is None:
            raise ValueError(
                "--network-custom-config-path must be specified for `custom` network"
            )

        validated_args = CLIArgs(
            network=network,
            network_custom_config_path=parsed_args.network_custom_config_path,
            chain_snapshot_path=_validate_file_path(parsed_args.chain_snapshot_path),
            state_id=_canonical_identifier(parse_state_id, parsed_args.state_id),
            block_id=_canonical_identifier(parse_block_id, parsed_args.block_id)
            if parsed_args.block_id is not None
            else None,
            validator_ids=[
                _canonical_identifier(parse_validator_id, v)
                for v in _validate_comma_separated_strings(
                    input_string=parsed_args.validator_ids,
                    entity_name="validator id",
                    min_values_required=0,
                )
            ],
            data_dir=_validate_dir_path(parsed_args.data_dir),
            log_level=logging.getLevelName(parsed_args.log_level),
        )
    except ValueError as e:
        parser.error(repr(e))
    else:
        return validated_args
