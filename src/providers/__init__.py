from .chain_store import ChainStore, StoredBlock, StoredState
from .in_memory_chain_store import ChainSnapshot, InMemoryChainStore, SnapshotState

__all__ = [
    "ChainSnapshot",
    "ChainStore",
    "InMemoryChainStore",
    "SnapshotState",
    "StoredBlock",
    "StoredState",
]
