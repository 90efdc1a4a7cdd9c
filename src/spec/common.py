from typing import Annotated

import msgspec

# Values are decoded from quoted or unquoted JSON integers,
# as served by the Beacon API.
UInt64 = Annotated[int, msgspec.Meta(ge=0, le=2**64 - 1)]

Slot = UInt64
Epoch = UInt64
ValidatorIndex = UInt64
CommitteeIndex = UInt64
Gwei = UInt64


def _hex_bytes(length: int) -> msgspec.Meta:
    return msgspec.Meta(pattern=f"^0x[0-9a-fA-F]{{{2 * length}}}$")


Version = Annotated[str, _hex_bytes(4)]
Root = Annotated[str, _hex_bytes(32)]
Hash32 = Annotated[str, _hex_bytes(32)]
BLSPubkey = Annotated[str, _hex_bytes(48)]
BLSSignature = Annotated[str, _hex_bytes(96)]


def compute_epoch_at_slot(slot: int, slots_per_epoch: int) -> int:
    return slot // slots_per_epoch
