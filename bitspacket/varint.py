"""
Literal value decoding (varint).

A literal is a run of 5-bit groups. The top bit of each group is a
continuation flag and the low 4 bits are payload, most significant
group first:

    1xxxx 1xxxx ... 0xxxx

Decoded values are capped at 64 bits.
"""

import logging

from bitspacket.errors import TruncatedPacketError, VarintOverflowError

# Import for type hints only
if False:  # noqa: SIM108
    from bitspacket.bitreader import BitReader

logger = logging.getLogger(__name__)

GROUP_BITS = 5
PAYLOAD_BITS = 4
CONTINUATION_FLAG = 0x10
PAYLOAD_MASK = 0x0F

VALUE_BITS = 64
MAX_VALUE = (1 << VALUE_BITS) - 1

# Folding a group shifts left by 4, so the accumulator must be below this
FOLD_LIMIT = 1 << (VALUE_BITS - PAYLOAD_BITS)


class Varint:
    """Decoded literal value and the number of groups it used."""

    __slots__ = ("_value", "_groups")

    def __init__(self, value: int, groups: int) -> None:
        """
        Initialize a varint.

        Args:
            value: Decoded value (0 to 2**64 - 1)
            groups: Number of 5-bit groups consumed
        """
        self._value = value
        self._groups = groups

    @property
    def value(self) -> int:
        return self._value

    @property
    def groups(self) -> int:
        return self._groups

    @property
    def bit_length(self) -> int:
        """Number of stream bits the literal occupied."""
        return self._groups * GROUP_BITS

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Varint):
            return NotImplemented
        return self._value == other._value and self._groups == other._groups

    def __hash__(self) -> int:
        return hash((self._value, self._groups))

    def __repr__(self) -> str:
        return f"Varint({self._value}, {self._groups})"


def decode_varint(reader: "BitReader") -> Varint:
    """
    Decode a literal value.

    Args:
        reader: BitReader positioned at the first group

    Returns:
        Decoded Varint

    Raises:
        TruncatedPacketError: If the stream ends before the last group
        VarintOverflowError: If the value does not fit in 64 bits
    """
    start = reader.position
    result = 0
    groups = 0

    while True:
        group = reader.consume_u8(GROUP_BITS)
        if group is None:
            raise TruncatedPacketError(
                f"Literal ended after {groups} groups without a last group",
                reader.position,
            )

        if result >= FOLD_LIMIT:
            raise VarintOverflowError(
                f"Literal exceeds {VALUE_BITS} bits", reader.position - GROUP_BITS
            )

        result = (result << PAYLOAD_BITS) | (group & PAYLOAD_MASK)
        groups += 1

        if not group & CONTINUATION_FLAG:
            break

    logger.debug("literal %d (%d groups) at bit %d", result, groups, start)
    return Varint(result, groups)
