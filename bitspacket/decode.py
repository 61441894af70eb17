"""
BITS packet decoding.

Packet layout (bit fields, MSB-first):

    VVV TTT <body>

- VVV: version (3 bits)
- TTT: type id (3 bits)

Literal body (TTT = 4): a varint, see bitspacket.varint.

Operator body (any other TTT):
- I = 0: 15-bit total length in bits of the sub-packets that follow
- I = 1: 11-bit number of sub-packets that follow

A transmission is a sequence of top-level packets followed by zero
padding up to the end of the last byte.
"""

import logging

from bitspacket.bitreader import U8, U16, BitReader
from bitspacket.errors import (
    ComparisonArityError,
    EmptyOperatorError,
    LengthMismatchError,
    TruncatedPacketError,
    UnknownPacketTypeError,
)
from bitspacket.hexcodec import hex_decode
from bitspacket.packet import (
    COMPARISON_TYPES,
    OPERATOR_TYPES,
    TYPE_LITERAL,
    LiteralPacket,
    OperatorPacket,
    Packet,
)
from bitspacket.varint import decode_varint

logger = logging.getLogger(__name__)

VERSION_BITS = 3
TYPE_ID_BITS = 3
LENGTH_TYPE_BITS = 1
TOTAL_LENGTH_BITS = 15
PACKET_COUNT_BITS = 11

LENGTH_TYPE_TOTAL_BITS = 0


def _read_field(reader: BitReader, count: int, name: str) -> int:
    """Read a fixed-width field, failing if the stream ends inside it."""
    value = reader.consume(count, U8 if count <= U8 else U16)
    if value is None:
        raise TruncatedPacketError(
            f"Stream ended reading {name} ({count} bits, {reader.remaining} left)",
            reader.position,
        )
    return value


class _OperatorFrame:
    """An operator packet whose sub-packets are still being decoded."""

    __slots__ = ("start", "version", "type_id", "end", "count", "children")

    def __init__(
        self,
        start: int,
        version: int,
        type_id: int,
        end: "int | None" = None,
        count: "int | None" = None,
    ) -> None:
        """
        Initialize an operator frame.

        Args:
            start: Bit offset of the operator header
            version: Operator version
            type_id: Operator type id
            end: Bit offset where the sub-packets end (total length mode)
            count: Number of sub-packets (packet count mode)
        """
        self.start = start
        self.version = version
        self.type_id = type_id
        self.end = end
        self.count = count
        self.children = []

    def is_complete(self, reader: BitReader) -> bool:
        """Check whether no further sub-packet belongs to this operator."""
        if self.end is not None:
            return reader.position >= self.end
        return len(self.children) >= self.count

    def close(self, reader: BitReader) -> OperatorPacket:
        """
        Build the operator packet from the decoded sub-packets.

        Raises:
            PacketDecodeError: If the sub-packets do not fit the operator
        """
        if self.end is not None and reader.position != self.end:
            raise LengthMismatchError(
                f"Sub-packets end at bit {reader.position}, expected {self.end}",
                self.start,
            )

        if not self.children:
            raise EmptyOperatorError(
                f"Operator type {self.type_id} has no sub-packets", self.start
            )

        if self.type_id in COMPARISON_TYPES and len(self.children) != 2:
            raise ComparisonArityError(
                f"Comparison type {self.type_id} needs 2 sub-packets, "
                f"got {len(self.children)}",
                self.start,
            )

        return OperatorPacket(self.version, self.type_id, self.children)


def _open_operator(
    reader: BitReader, start: int, version: int, type_id: int
) -> _OperatorFrame:
    """Read an operator's length fields and open a frame for it."""
    length_type = _read_field(reader, LENGTH_TYPE_BITS, "length type")

    if length_type == LENGTH_TYPE_TOTAL_BITS:
        total_bits = _read_field(reader, TOTAL_LENGTH_BITS, "total length")
        logger.debug(
            "operator type %d at bit %d: %d bits of sub-packets",
            type_id,
            start,
            total_bits,
        )
        return _OperatorFrame(start, version, type_id, end=reader.position + total_bits)

    packet_count = _read_field(reader, PACKET_COUNT_BITS, "packet count")
    logger.debug(
        "operator type %d at bit %d: %d sub-packets",
        type_id,
        start,
        packet_count,
    )
    return _OperatorFrame(start, version, type_id, count=packet_count)


def decode_packet(reader: BitReader) -> Packet:
    """
    Decode one packet, including all of its sub-packets.

    Operators still waiting for sub-packets are kept on an explicit
    stack, so nesting depth is bounded by memory only.

    Args:
        reader: BitReader positioned at the packet header

    Returns:
        Decoded packet

    Raises:
        PacketDecodeError: If the packet is truncated or malformed
    """
    stack = []

    while True:
        start = reader.position
        version = _read_field(reader, VERSION_BITS, "version")
        type_id = _read_field(reader, TYPE_ID_BITS, "type id")

        if type_id == TYPE_LITERAL:
            packet = LiteralPacket(version, decode_varint(reader))
        elif type_id in OPERATOR_TYPES:
            frame = _open_operator(reader, start, version, type_id)
            if not frame.is_complete(reader):
                stack.append(frame)
                continue
            packet = frame.close(reader)
        else:
            raise UnknownPacketTypeError(f"Unknown packet type id {type_id}", start)

        # Hand the packet to its parent, closing every parent it completes
        while stack:
            frame = stack[-1]
            frame.children.append(packet)
            if not frame.is_complete(reader):
                break
            stack.pop()
            packet = frame.close(reader)
        else:
            return packet


def decode_packets(data: bytes) -> "list[Packet]":
    """
    Decode every top-level packet of a transmission.

    Trailing bits are handled as follows:
    - All zero (including none left): padding, decoding stops cleanly.
    - Any bit set: the start of another packet, which must decode
      completely. Fewer than six leftover bits with a set bit are an
      incomplete header and raise TruncatedPacketError.

    Args:
        data: Transmission bytes

    Returns:
        Top-level packets in stream order (empty if data holds no set bit)

    Raises:
        PacketDecodeError: If a packet is truncated or malformed
    """
    reader = BitReader(data)
    packets = []

    while not reader.is_padding():
        packets.append(decode_packet(reader))

    logger.debug(
        "decoded %d top-level packets, %d padding bits",
        len(packets),
        reader.remaining,
    )
    return packets


def decode_hex(text: str) -> "list[Packet]":
    """
    Decode a hex transmission into its top-level packets.

    Args:
        text: Hex digits (surrounding whitespace is ignored)

    Returns:
        Top-level packets in stream order

    Raises:
        HexDecodeError: If the text is not valid hex
        PacketDecodeError: If a packet is truncated or malformed
    """
    return decode_packets(hex_decode(text.strip()))
