"""Answers Beacon API style queries against a chain store.

Each query takes identifiers as the raw strings found in a request path
or query string. Malformed identifiers raise IdentifierParseError, which
callers are expected to report as a client error. Identifiers that don't
match any object yield None.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from prometheus_client import Counter

from identifiers import (
    IdentifierParseError,
    parse_block_id,
    parse_root,
    parse_state_id,
    parse_validator_id,
)
from observability import ErrorType, get_shared_metrics
from providers import ChainStore, StoredBlock, StoredState
from schemas import SchemaBeaconAPI, SchemaValidator
from spec.base import Checkpoint
from spec.validator import Validator

_VALIDATOR_STATUS_QUERIES = Counter(
    "validator_status_queries",
    "Number of validator statuses served, per status",
    labelnames=["status"],
)
(_ERRORS_METRIC,) = get_shared_metrics()

_IdT = TypeVar("_IdT")


def _api_checkpoint(checkpoint: Checkpoint) -> SchemaBeaconAPI.Checkpoint:
    return SchemaBeaconAPI.Checkpoint(
        epoch=str(checkpoint.epoch),
        root=checkpoint.root.lower(),
    )


def _api_validator(validator: Validator) -> SchemaBeaconAPI.Validator:
    return SchemaBeaconAPI.Validator(
        pubkey=validator.pubkey.lower(),
        withdrawal_credentials=validator.withdrawal_credentials.lower(),
        effective_balance=str(validator.effective_balance),
        slashed=validator.slashed,
        activation_eligibility_epoch=str(validator.activation_eligibility_epoch),
        activation_epoch=str(validator.activation_epoch),
        exit_epoch=str(validator.exit_epoch),
        withdrawable_epoch=str(validator.withdrawable_epoch),
    )


def _api_block_header(block: StoredBlock) -> SchemaBeaconAPI.BlockHeaderData:
    message = block.header.message
    return SchemaBeaconAPI.BlockHeaderData(
        root=block.root.lower(),
        canonical=block.canonical,
        header=SchemaBeaconAPI.BlockHeaderAndSignature(
            message=SchemaBeaconAPI.BeaconBlockHeader(
                slot=str(message.slot),
                proposer_index=str(message.proposer_index),
                parent_root=message.parent_root.lower(),
                state_root=message.state_root.lower(),
                body_root=message.body_root.lower(),
            ),
            signature=block.header.signature.lower(),
        ),
    )


class BeaconQueryService:
    def __init__(self, chain_store: ChainStore):
        self.chain_store = chain_store

        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(logging.getLogger().level)

    def _parse(self, parser: Callable[[str], _IdT], text: str) -> _IdT:
        try:
            return parser(text)
        except IdentifierParseError as e:
            _ERRORS_METRIC.labels(error_type=ErrorType.IDENTIFIER_PARSE.value).inc()
            self.logger.debug(f"Rejected identifier: {e}")
            raise

    def _not_found(self, entity_name: str, identifier: object) -> None:
        _ERRORS_METRIC.labels(error_type=ErrorType.NOT_FOUND.value).inc()
        self.logger.debug(f"{entity_name} {identifier} not found")

    def _get_block(self, block_id: str) -> StoredBlock | None:
        _block_id = self._parse(parse_block_id, block_id)
        block = self.chain_store.get_block(_block_id)
        if block is None:
            self._not_found("Block", _block_id)
        return block

    def _get_state(self, state_id: str) -> StoredState | None:
        _state_id = self._parse(parse_state_id, state_id)
        state = self.chain_store.get_state(_state_id)
        if state is None:
            self._not_found("State", _state_id)
        return state

    def _get_status(
        self, state: StoredState, validator: Validator | None
    ) -> SchemaValidator.ValidatorStatus:
        status = SchemaValidator.get_validator_status(
            validator,
            epoch=self.chain_store.state_epoch(state),
            finalized_epoch=int(state.state.finalized_checkpoint.epoch),
        )
        _VALIDATOR_STATUS_QUERIES.labels(
            status=type(status).__struct_config__.tag
        ).inc()
        return status

    def _validator_data(
        self, state: StoredState, index: int, validator: Validator
    ) -> SchemaBeaconAPI.ValidatorData:
        return SchemaBeaconAPI.ValidatorData(
            index=str(index),
            balance=str(state.state.balances[index]),
            status=self._get_status(state, validator),  # type: ignore[arg-type]
            validator=_api_validator(validator),
        )

    def get_genesis(
        self,
    ) -> SchemaBeaconAPI.GenericResponse[SchemaBeaconAPI.GenesisData]:
        genesis = self.chain_store.genesis()
        return SchemaBeaconAPI.GenericResponse(
            data=SchemaBeaconAPI.GenesisData(
                genesis_time=str(genesis.genesis_time),
                genesis_validators_root=genesis.genesis_validators_root.lower(),
                genesis_fork_version=genesis.genesis_fork_version.lower(),
            )
        )

    def get_block_root(
        self, block_id: str
    ) -> SchemaBeaconAPI.GenericResponse[SchemaBeaconAPI.RootData] | None:
        block = self._get_block(block_id)
        if block is None:
            return None
        return SchemaBeaconAPI.GenericResponse(
            data=SchemaBeaconAPI.RootData(root=block.root.lower())
        )

    def get_block_header(
        self, block_id: str
    ) -> SchemaBeaconAPI.GenericResponse[SchemaBeaconAPI.BlockHeaderData] | None:
        block = self._get_block(block_id)
        if block is None:
            return None
        return SchemaBeaconAPI.GenericResponse(data=_api_block_header(block))

    def get_block_headers(
        self, query: SchemaBeaconAPI.HeadersQuery
    ) -> SchemaBeaconAPI.GenericResponse[list[SchemaBeaconAPI.BlockHeaderData]]:
        parent_root = None
        if query.parent_root is not None:
            parent_root = str(self._parse(parse_root, query.parent_root))

        blocks = self.chain_store.get_headers(
            slot=query.slot, parent_root=parent_root
        )
        return SchemaBeaconAPI.GenericResponse(
            data=[_api_block_header(b) for b in blocks]
        )

    def get_state_root(
        self, state_id: str
    ) -> SchemaBeaconAPI.GenericResponse[SchemaBeaconAPI.RootData] | None:
        state = self._get_state(state_id)
        if state is None:
            return None
        return SchemaBeaconAPI.GenericResponse(
            data=SchemaBeaconAPI.RootData(root=state.root.lower())
        )

    def get_finality_checkpoints(
        self, state_id: str
    ) -> SchemaBeaconAPI.GenericResponse[SchemaBeaconAPI.FinalityCheckpointsData] | None:
        state = self._get_state(state_id)
        if state is None:
            return None
        return SchemaBeaconAPI.GenericResponse(
            data=SchemaBeaconAPI.FinalityCheckpointsData(
                previous_justified=_api_checkpoint(
                    state.state.previous_justified_checkpoint
                ),
                current_justified=_api_checkpoint(
                    state.state.current_justified_checkpoint
                ),
                finalized=_api_checkpoint(state.state.finalized_checkpoint),
            )
        )

    def get_validator(
        self, state_id: str, validator_id: str
    ) -> SchemaBeaconAPI.GenericResponse[SchemaBeaconAPI.ValidatorData] | None:
        state = self._get_state(state_id)
        if state is None:
            return None

        _validator_id = self._parse(parse_validator_id, validator_id)
        result = self.chain_store.get_validator(state, _validator_id)
        if result is None:
            self._not_found("Validator", _validator_id)
            return None

        index, validator = result
        return SchemaBeaconAPI.GenericResponse(
            data=self._validator_data(state, index, validator)
        )

    def get_validators(
        self, state_id: str, validator_ids: list[str] | None = None
    ) -> SchemaBeaconAPI.GenericResponse[list[SchemaBeaconAPI.ValidatorData]] | None:
        """
        Returns the requested validators, or all validators in the state if
        no ids are provided. Ids that don't match a validator are skipped.
        """
        state = self._get_state(state_id)
        if state is None:
            return None

        if validator_ids is None:
            return SchemaBeaconAPI.GenericResponse(
                data=[
                    self._validator_data(state, index, validator)
                    for index, validator in enumerate(state.state.validators)
                ]
            )

        # Parse all ids upfront so that one malformed id rejects the whole request
        _validator_ids = [self._parse(parse_validator_id, v) for v in validator_ids]

        data = []
        seen_indices = set()
        for _validator_id in _validator_ids:
            result = self.chain_store.get_validator(state, _validator_id)
            if result is None:
                self._not_found("Validator", _validator_id)
                continue
            index, validator = result
            if index in seen_indices:
                continue
            seen_indices.add(index)
            data.append(self._validator_data(state, index, validator))

        return SchemaBeaconAPI.GenericResponse(data=data)

    def get_validator_status(
        self, state_id: str, validator_id: str
    ) -> SchemaBeaconAPI.GenericResponse[SchemaValidator.AnyValidatorStatus] | None:
        """
        Unlike `get_validator`, a validator that is not found is not treated
        as missing data but reported with the `unknown` status.
        """
        state = self._get_state(state_id)
        if state is None:
            return None

        _validator_id = self._parse(parse_validator_id, validator_id)
        result = self.chain_store.get_validator(state, _validator_id)
        validator = result[1] if result is not None else None
        return SchemaBeaconAPI.GenericResponse(
            data=self._get_status(state, validator)  # type: ignore[arg-type]
        )

    def get_committees(
        self, state_id: str, query: SchemaBeaconAPI.CommitteesQuery
    ) -> SchemaBeaconAPI.GenericResponse[list[SchemaBeaconAPI.CommitteeData]] | None:
        state = self._get_state(state_id)
        if state is None:
            return None

        return SchemaBeaconAPI.GenericResponse(
            data=[
                SchemaBeaconAPI.CommitteeData(
                    index=str(c.index),
                    slot=str(c.slot),
                    validators=[str(v) for v in c.validators],
                )
                for c in state.state.committees
                if (query.slot is None or c.slot == query.slot)
                and (query.index is None or c.index == query.index)
            ]
        )
