"""
BITS Packet Decoder

Decodes hexadecimal BITS transmissions into trees of version-tagged
packets and evaluates them as arithmetic expressions.
"""

__version__ = "1.0.0"

from bitspacket.decode import decode_hex, decode_packet, decode_packets
from bitspacket.errors import BitsError, HexDecodeError, PacketDecodeError
from bitspacket.evaluate import (
    evaluate,
    solve_evaluate,
    solve_version_sum,
    version_sum,
)
from bitspacket.packet import LiteralPacket, OperatorPacket, Packet

__all__ = [
    "BitsError",
    "HexDecodeError",
    "LiteralPacket",
    "OperatorPacket",
    "Packet",
    "PacketDecodeError",
    "decode_hex",
    "decode_packet",
    "decode_packets",
    "evaluate",
    "solve_evaluate",
    "solve_version_sum",
    "version_sum",
    "__version__",
]
