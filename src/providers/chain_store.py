import msgspec

from identifiers import BlockId, ChainTag, StateId, ValidatorId
from spec.base import Genesis
from spec.block import SignedBeaconBlockHeader
from spec.common import Root, compute_epoch_at_slot
from spec.state import BeaconState
from spec.validator import Validator


class StoredBlock(msgspec.Struct, frozen=True):
    root: Root
    canonical: bool
    header: SignedBeaconBlockHeader


class StoredState(msgspec.Struct, frozen=True):
    root: Root
    state: BeaconState


class ChainStore:
    """
    Read access to blocks, states and validators.

    Lookups that don't match any object return None, it is up
    to the caller to decide whether that is an error.
    """

    def __init__(self, slots_per_epoch: int) -> None:
        self.slots_per_epoch = slots_per_epoch

    def genesis(self) -> Genesis:
        raise NotImplementedError

    def get_block(self, block_id: BlockId) -> StoredBlock | None:
        raise NotImplementedError

    def get_state(self, state_id: StateId) -> StoredState | None:
        raise NotImplementedError

    def get_validator(
        self, state: StoredState, validator_id: ValidatorId
    ) -> tuple[int, Validator] | None:
        raise NotImplementedError

    def get_headers(
        self, slot: int | None = None, parent_root: str | None = None
    ) -> list[StoredBlock]:
        raise NotImplementedError

    def state_epoch(self, state: StoredState) -> int:
        return compute_epoch_at_slot(state.state.slot, self.slots_per_epoch)

    def current_epoch(self) -> int:
        head_state = self.get_state(ChainTag.HEAD)
        if head_state is None:
            raise RuntimeError("No head state available")
        return self.state_epoch(head_state)

    def finalized_epoch(self) -> int:
        head_state = self.get_state(ChainTag.HEAD)
        if head_state is None:
            raise RuntimeError("No head state available")
        return int(head_state.state.finalized_checkpoint.epoch)
