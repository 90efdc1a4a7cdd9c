"""A chain store holding a fixed set of blocks and states in memory.

The store is typically loaded from a JSON snapshot:

{
  "genesis": {...},
  "blocks": [{"root": "0x..", "canonical": true, "header": {...}}, ...],
  "states": [{"root": "0x..", "canonical": true, "state": {...}}, ...]
}

Integer values may be quoted, as served by the Beacon API.
"""

import logging
from pathlib import Path
from typing import Self

import msgspec

from identifiers import (
    BlockId,
    ChainTag,
    IndexId,
    PubkeyId,
    RootId,
    SlotId,
    StateId,
    ValidatorId,
)
from spec.base import Checkpoint, Genesis
from spec.constants import GENESIS_EPOCH, GENESIS_SLOT
from spec.validator import Validator

from .chain_store import ChainStore, StoredBlock, StoredState


class SnapshotState(StoredState, frozen=True):
    canonical: bool = True


class ChainSnapshot(msgspec.Struct, frozen=True):
    genesis: Genesis
    blocks: list[StoredBlock]
    states: list[SnapshotState]


class InMemoryChainStore(ChainStore):
    def __init__(
        self,
        genesis: Genesis,
        blocks: list[StoredBlock],
        states: list[SnapshotState],
        slots_per_epoch: int,
    ) -> None:
        super().__init__(slots_per_epoch=slots_per_epoch)
        self.logger = logging.getLogger(self.__class__.__name__)

        self._genesis = genesis

        self._blocks_by_root = {b.root.lower(): b for b in blocks}
        self._canonical_blocks_by_slot: dict[int, StoredBlock] = {}
        for block in blocks:
            if not block.canonical:
                continue
            slot = block.header.message.slot
            if slot in self._canonical_blocks_by_slot:
                raise ValueError(f"Multiple canonical blocks at slot {slot}")
            self._canonical_blocks_by_slot[slot] = block

        self._states_by_root: dict[str, StoredState] = {
            s.root.lower(): s for s in states
        }
        self._canonical_states_by_slot: dict[int, StoredState] = {}
        for state in states:
            if not state.canonical:
                continue
            slot = state.state.slot
            if slot in self._canonical_states_by_slot:
                raise ValueError(f"Multiple canonical states at slot {slot}")
            self._canonical_states_by_slot[slot] = state

        # State root -> (pubkey -> validator index), built on first use
        self._pubkey_indices: dict[str, dict[str, int]] = {}

        self.logger.debug(
            f"Loaded {len(self._blocks_by_root)} blocks"
            f" and {len(self._states_by_root)} states",
        )

    @classmethod
    def from_snapshot(cls, path: Path, slots_per_epoch: int) -> Self:
        with Path.open(path, "rb") as f:
            snapshot = msgspec.json.decode(f.read(), type=ChainSnapshot, strict=False)

        return cls(
            genesis=snapshot.genesis,
            blocks=snapshot.blocks,
            states=snapshot.states,
            slots_per_epoch=slots_per_epoch,
        )

    def genesis(self) -> Genesis:
        return self._genesis

    def _head_block(self) -> StoredBlock | None:
        if not self._canonical_blocks_by_slot:
            return None
        return self._canonical_blocks_by_slot[max(self._canonical_blocks_by_slot)]

    def _checkpoint_block(self, checkpoint: Checkpoint) -> StoredBlock | None:
        block = self._blocks_by_root.get(checkpoint.root.lower())
        if block is None and checkpoint.epoch == GENESIS_EPOCH:
            # The genesis checkpoint root is not necessarily the genesis block root
            return self._canonical_blocks_by_slot.get(GENESIS_SLOT)
        return block

    def _get_tagged_block(self, tag: ChainTag) -> StoredBlock | None:
        if tag == ChainTag.HEAD:
            return self._head_block()
        if tag == ChainTag.GENESIS:
            return self._canonical_blocks_by_slot.get(GENESIS_SLOT)

        head_block = self._head_block()
        if head_block is None:
            return None
        head_state = self._states_by_root.get(
            head_block.header.message.state_root.lower()
        )
        if head_state is None:
            self.logger.warning(f"State for head block {head_block.root} missing")
            return None

        if tag == ChainTag.FINALIZED:
            return self._checkpoint_block(head_state.state.finalized_checkpoint)
        if tag == ChainTag.JUSTIFIED:
            return self._checkpoint_block(head_state.state.current_justified_checkpoint)
        raise NotImplementedError(f"Unexpected tag {tag}")

    def get_block(self, block_id: BlockId) -> StoredBlock | None:
        if isinstance(block_id, ChainTag):
            return self._get_tagged_block(block_id)
        if isinstance(block_id, SlotId):
            return self._canonical_blocks_by_slot.get(block_id.slot)
        if isinstance(block_id, RootId):
            return self._blocks_by_root.get(str(block_id))
        raise NotImplementedError(f"Unexpected block id type {type(block_id)}")

    def get_state(self, state_id: StateId) -> StoredState | None:
        if isinstance(state_id, ChainTag):
            block = self._get_tagged_block(state_id)
            if block is None:
                return None
            return self._states_by_root.get(block.header.message.state_root.lower())
        if isinstance(state_id, SlotId):
            return self._canonical_states_by_slot.get(state_id.slot)
        if isinstance(state_id, RootId):
            return self._states_by_root.get(str(state_id))
        raise NotImplementedError(f"Unexpected state id type {type(state_id)}")

    def _pubkey_index(self, state: StoredState) -> dict[str, int]:
        state_root = state.root.lower()
        if state_root not in self._pubkey_indices:
            self._pubkey_indices[state_root] = {
                v.pubkey.lower(): index for index, v in enumerate(state.state.validators)
            }
        return self._pubkey_indices[state_root]

    def get_validator(
        self, state: StoredState, validator_id: ValidatorId
    ) -> tuple[int, Validator] | None:
        if isinstance(validator_id, IndexId):
            index = validator_id.index
        elif isinstance(validator_id, PubkeyId):
            _index = self._pubkey_index(state).get(str(validator_id))
            if _index is None:
                return None
            index = _index
        else:
            raise NotImplementedError(
                f"Unexpected validator id type {type(validator_id)}"
            )

        if index >= len(state.state.validators):
            return None
        return index, state.state.validators[index]

    def get_headers(
        self, slot: int | None = None, parent_root: str | None = None
    ) -> list[StoredBlock]:
        if slot is None and parent_root is None:
            head_block = self._head_block()
            return [head_block] if head_block is not None else []

        blocks = [
            b
            for b in self._blocks_by_root.values()
            if (slot is None or b.header.message.slot == slot)
            and (
                parent_root is None
                or b.header.message.parent_root.lower() == parent_root.lower()
            )
        ]
        # Canonical blocks first within each slot
        return sorted(blocks, key=lambda b: (b.header.message.slot, not b.canonical))
