"""
Packet tree queries: arithmetic evaluation and version sums.

Evaluation rules:
- Literal: its value
- Sum / Product: sum / product of the sub-packet values
- Minimum / Maximum: smallest / largest sub-packet value
- Greater / Less / Equal: 1 if the relation holds between the first
  and second sub-packet values, else 0
"""

from collections import deque

from bitspacket.decode import decode_hex
from bitspacket.errors import EmptyTransmissionError
from bitspacket.packet import (
    TYPE_EQUAL,
    TYPE_GREATER,
    TYPE_LESS,
    TYPE_MAXIMUM,
    TYPE_MINIMUM,
    TYPE_PRODUCT,
    TYPE_SUM,
    LiteralPacket,
    Packet,
)


def _apply(packet: Packet, values: list) -> int:
    """Apply an operator packet to its already evaluated sub-packet values."""
    type_id = packet.type_id

    if type_id == TYPE_SUM:
        return sum(values)

    if type_id == TYPE_PRODUCT:
        result = 1
        for value in values:
            result *= value
        return result

    if type_id == TYPE_MINIMUM:
        return min(values)

    if type_id == TYPE_MAXIMUM:
        return max(values)

    lhs, rhs = values[0], values[1]

    if type_id == TYPE_GREATER:
        return 1 if lhs > rhs else 0

    if type_id == TYPE_LESS:
        return 1 if lhs < rhs else 0

    if type_id == TYPE_EQUAL:
        return 1 if lhs == rhs else 0

    raise ValueError(f"Cannot evaluate packet kind {packet.kind!r}")


def evaluate(packet: Packet) -> int:
    """
    Compute the value of a packet tree.

    The tree is walked post-order with an explicit stack, so deeply
    nested transmissions evaluate without recursion.

    Args:
        packet: Root packet, as produced by the decoder

    Returns:
        Value of the expression the tree encodes
    """
    pending = [(packet, False)]
    values = []

    while pending:
        node, expanded = pending.pop()

        if isinstance(node, LiteralPacket):
            values.append(node.value)
        elif not expanded:
            pending.append((node, True))
            # Reversed so sub-packet values land on the stack in order
            pending.extend((child, False) for child in reversed(node.sub_packets()))
        else:
            count = len(node.sub_packets())
            args = values[len(values) - count :]
            del values[len(values) - count :]
            values.append(_apply(node, args))

    return values[0]


def version_sum(packets) -> int:
    """
    Sum the versions of every packet in one or more trees.

    Args:
        packets: A Packet or an iterable of top-level packets

    Returns:
        Total of all version fields, nested packets included
    """
    if isinstance(packets, Packet):
        packets = [packets]

    total = 0
    queue = deque(packets)
    while queue:
        packet = queue.popleft()
        total += packet.version
        queue.extend(packet.sub_packets())

    return total


def _read_transmission(text: str) -> "list[Packet]":
    text = text.strip()
    if not text:
        raise EmptyTransmissionError("Empty transmission")
    return decode_hex(text)


def solve_version_sum(text: str) -> int:
    """Decode a hex transmission and sum all packet versions."""
    return version_sum(_read_transmission(text))


def solve_evaluate(text: str) -> int:
    """
    Decode a hex transmission and evaluate its first top-level packet.

    Raises:
        EmptyTransmissionError: If the transmission holds no packet
        BitsError: If the transmission cannot be decoded
    """
    packets = _read_transmission(text)
    if not packets:
        raise EmptyTransmissionError("Transmission contains no packets")
    return evaluate(packets[0])
