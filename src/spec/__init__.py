from .base import Checkpoint, Fork, Genesis
from .block import BeaconBlockHeader, SignedBeaconBlockHeader
from .state import BeaconCommittee, BeaconState
from .validator import Validator

__all__ = [
    "BeaconBlockHeader",
    "BeaconCommittee",
    "BeaconState",
    "Checkpoint",
    "Fork",
    "Genesis",
    "SignedBeaconBlockHeader",
    "Validator",
]
