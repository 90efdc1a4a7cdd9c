import logging
import sys

import msgspec

from args import CLIArgs, log_cli_arg_values, parse_cli_args
from observability import (
    get_service_commit,
    get_service_name,
    get_service_version,
    init_observability,
)
from providers import InMemoryChainStore
from schemas import SchemaBeaconAPI
from services import BeaconQueryService
from spec.configs import get_network_spec


def _print_json(obj: msgspec.Struct) -> None:
    print(msgspec.json.encode(obj).decode())  # noqa: T201


def run(cli_args: CLIArgs) -> int:
    """
    Runs the queries requested through the CLI arguments and prints
    each response as a line of JSON.

    Returns 1 if any of the queried objects was not found, 0 otherwise.
    """
    logger = logging.getLogger(get_service_name())

    spec = get_network_spec(
        network=cli_args.network,
        network_custom_config_path=cli_args.network_custom_config_path,
    )
    chain_store = InMemoryChainStore.from_snapshot(
        path=cli_args.chain_snapshot_path,
        slots_per_epoch=spec.SLOTS_PER_EPOCH,
    )
    service = BeaconQueryService(chain_store=chain_store)

    queries: list[tuple[str, msgspec.Struct | None]] = []
    if cli_args.block_id is not None:
        queries.append(
            (f"Block {cli_args.block_id}", service.get_block_header(cli_args.block_id))
        )
    queries.append(
        (
            f"State {cli_args.state_id}",
            service.get_finality_checkpoints(cli_args.state_id),
        )
    )
    queries.extend(
        (
            f"Validator {validator_id} in state {cli_args.state_id}",
            service.get_validator(cli_args.state_id, validator_id),
        )
        for validator_id in cli_args.validator_ids
    )

    exit_code = 0
    for description, response in queries:
        if response is None:
            logger.error(f"{description} not found")
            _print_json(
                SchemaBeaconAPI.ErrorResponse(
                    code=404, message=f"{description} not found"
                )
            )
            exit_code = 1
        else:
            _print_json(response)
    return exit_code


if __name__ == "__main__":
    cli_args = parse_cli_args(args=sys.argv[1:])
    init_observability(
        log_level=cli_args.log_level,
        data_dir=cli_args.data_dir,
    )
    logging.getLogger(get_service_name()).info(
        f"Starting {get_service_name()} {get_service_version()}"
        f" (commit {get_service_commit()})"
    )
    log_cli_arg_values(cli_args)
    sys.exit(run(cli_args=cli_args))
