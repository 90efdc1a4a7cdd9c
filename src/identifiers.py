"""Parsing and rendering of the identifiers used to address chain objects.

Blocks and states share one shape:

    head | genesis | finalized | justified | <slot> | 0x<root>

Validators are addressed by index or by public key:

    <index> | 0x<pubkey>

Every variant renders back to its canonical form through ``str()``,
and parsing that canonical form yields an equal identifier.
"""

import re
from collections.abc import Callable
from enum import Enum
from typing import ClassVar

import msgspec

UINT64_MAX = 2**64 - 1

_DECIMAL_RE = re.compile(r"[0-9]+")


class IdentifierParseError(ValueError):
    pass


class ChainTag(Enum):
    HEAD = "head"
    GENESIS = "genesis"
    FINALIZED = "finalized"
    JUSTIFIED = "justified"

    def __str__(self) -> str:
        return self.value


class SlotId(msgspec.Struct, frozen=True):
    slot: int

    def __str__(self) -> str:
        return str(self.slot)


class IndexId(msgspec.Struct, frozen=True):
    index: int

    def __str__(self) -> str:
        return str(self.index)


class _HexId(msgspec.Struct, frozen=True):
    BYTE_LENGTH: ClassVar[int]

    @property
    def value(self) -> bytes:
        raise NotImplementedError

    def __str__(self) -> str:
        return "0x" + self.value.hex()


class RootId(_HexId, frozen=True):
    BYTE_LENGTH: ClassVar[int] = 32

    root: bytes

    @property
    def value(self) -> bytes:
        return self.root


class PubkeyId(_HexId, frozen=True):
    BYTE_LENGTH: ClassVar[int] = 48

    pubkey: bytes

    @property
    def value(self) -> bytes:
        return self.pubkey


BlockId = ChainTag | SlotId | RootId
StateId = ChainTag | SlotId | RootId
ValidatorId = IndexId | PubkeyId

_TAGS_BY_VALUE = {tag.value: tag for tag in ChainTag}


def _decode_uint64(text: str) -> int:
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError("not a decimal number")
    value = int(text)
    if value > UINT64_MAX:
        raise ValueError("number too large to fit in a 64-bit unsigned integer")
    return value


def _decode_hex(text: str, byte_length: int) -> bytes:
    if len(text) != 2 * byte_length:
        raise ValueError(
            f"expected {2 * byte_length} hex characters, got {len(text)}"
        )
    decoded = bytes.fromhex(text)
    # bytes.fromhex skips whitespace between byte pairs
    if len(decoded) != byte_length:
        raise ValueError(f"expected {byte_length} bytes, got {len(decoded)}")
    return decoded


class IdentifierGrammar(msgspec.Struct, frozen=True):
    """
    Describes how one family of identifiers is spelled.

    The checks run in a fixed order: symbolic tags first (if the family
    has any), then anything starting with ``0x`` is decoded as hex, and
    only then is the text parsed as a decimal number. A ``0x`` prefix is
    therefore never interpreted numerically.
    """

    accepts_tags: bool
    numeric_variant: Callable[[int], SlotId | IndexId]
    numeric_label: str
    hex_variant: type[RootId] | type[PubkeyId]
    hex_label: str

    def parse(self, text: str) -> ChainTag | SlotId | IndexId | RootId | PubkeyId:
        if self.accepts_tags and text in _TAGS_BY_VALUE:
            return _TAGS_BY_VALUE[text]

        if text.startswith("0x"):
            try:
                return self.hex_variant(
                    _decode_hex(text[2:], self.hex_variant.BYTE_LENGTH)
                )
            except ValueError as e:
                raise IdentifierParseError(
                    f"{text} cannot be parsed as a {self.hex_label}: {e}"
                ) from e

        try:
            return self.numeric_variant(_decode_uint64(text))
        except ValueError as e:
            raise IdentifierParseError(
                f"{text} cannot be parsed as a {self.numeric_label}: {e}"
            ) from e


BLOCK_ID_GRAMMAR = IdentifierGrammar(
    accepts_tags=True,
    numeric_variant=SlotId,
    numeric_label="parameter",
    hex_variant=RootId,
    hex_label="root",
)
STATE_ID_GRAMMAR = IdentifierGrammar(
    accepts_tags=True,
    numeric_variant=SlotId,
    numeric_label="slot",
    hex_variant=RootId,
    hex_label="root",
)
# Validator indices are reported as "slot" in error messages,
# matching what API consumers already see from other clients.
VALIDATOR_ID_GRAMMAR = IdentifierGrammar(
    accepts_tags=False,
    numeric_variant=IndexId,
    numeric_label="slot",
    hex_variant=PubkeyId,
    hex_label="public key",
)


def parse_block_id(text: str) -> BlockId:
    return BLOCK_ID_GRAMMAR.parse(text)  # type: ignore[return-value]


def parse_state_id(text: str) -> StateId:
    return STATE_ID_GRAMMAR.parse(text)  # type: ignore[return-value]


def parse_validator_id(text: str) -> ValidatorId:
    return VALIDATOR_ID_GRAMMAR.parse(text)  # type: ignore[return-value]


def parse_root(text: str) -> RootId:
    if not text.startswith("0x"):
        raise IdentifierParseError(
            f"{text} cannot be parsed as a root: missing 0x prefix"
        )
    return BLOCK_ID_GRAMMAR.parse(text)  # type: ignore[return-value]
