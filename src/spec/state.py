from typing import Annotated

import msgspec

from spec.base import Checkpoint, Fork
from spec.common import CommitteeIndex, Gwei, Root, Slot, UInt64, ValidatorIndex
from spec.constants import VALIDATOR_REGISTRY_LIMIT
from spec.validator import Validator


class BeaconCommittee(msgspec.Struct, frozen=True):
    index: CommitteeIndex
    slot: Slot
    validators: list[ValidatorIndex]


class BeaconState(msgspec.Struct, frozen=True):
    """
    The subset of a beacon state needed to answer state queries.

    Committees are not derived from the registry here, they are
    taken as already computed for the state's epoch.
    """

    genesis_time: UInt64
    genesis_validators_root: Root
    slot: Slot
    fork: Fork
    validators: Annotated[
        list[Validator], msgspec.Meta(max_length=VALIDATOR_REGISTRY_LIMIT)
    ]
    balances: Annotated[list[Gwei], msgspec.Meta(max_length=VALIDATOR_REGISTRY_LIMIT)]
    previous_justified_checkpoint: Checkpoint
    current_justified_checkpoint: Checkpoint
    finalized_checkpoint: Checkpoint
    committees: list[BeaconCommittee] = msgspec.field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.validators) != len(self.balances):
            raise ValueError(
                f"State at slot {self.slot} has {len(self.validators)} validators"
                f" but {len(self.balances)} balances"
            )
