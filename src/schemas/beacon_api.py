"""API response models for the Beacon Node API.

Integers are carried as decimal strings and byte values as
0x-prefixed hex strings, as the Beacon API serves them.

Useful links:

https://github.com/ethereum/beacon-APIs
https://ethereum.github.io/beacon-APIs/
"""

from typing import Generic, TypeVar

import msgspec

from schemas.validator import AnyValidatorStatus

T = TypeVar("T")


class GenericResponse(msgspec.Struct, Generic[T]):
    data: T


class ErrorResponse(msgspec.Struct):
    code: int
    message: str


class GenesisData(msgspec.Struct):
    genesis_time: str
    genesis_validators_root: str
    genesis_fork_version: str


class RootData(msgspec.Struct):
    root: str


class Checkpoint(msgspec.Struct):
    epoch: str
    root: str


class FinalityCheckpointsData(msgspec.Struct):
    previous_justified: Checkpoint
    current_justified: Checkpoint
    finalized: Checkpoint


class Validator(msgspec.Struct):
    pubkey: str
    withdrawal_credentials: str
    effective_balance: str
    slashed: bool
    activation_eligibility_epoch: str
    activation_epoch: str
    exit_epoch: str
    withdrawable_epoch: str


class ValidatorData(msgspec.Struct):
    index: str
    balance: str
    status: AnyValidatorStatus
    validator: Validator


class CommitteesQuery(msgspec.Struct, kw_only=True):
    slot: int | None = None
    index: int | None = None


class CommitteeData(msgspec.Struct):
    index: str
    slot: str
    validators: list[str]


class HeadersQuery(msgspec.Struct, kw_only=True):
    slot: int | None = None
    parent_root: str | None = None


class BeaconBlockHeader(msgspec.Struct):
    slot: str
    proposer_index: str
    parent_root: str
    state_root: str
    body_root: str


class BlockHeaderAndSignature(msgspec.Struct):
    message: BeaconBlockHeader
    signature: str


class BlockHeaderData(msgspec.Struct):
    root: str
    canonical: bool
    header: BlockHeaderAndSignature
