"""
Hex text codec for BITS transmissions.

Transmissions arrive as hexadecimal text, two digits per byte, most
significant nibble first.
"""

from bitspacket.errors import HexDecodeError

HEX_DIGITS = "0123456789abcdefABCDEF"


def hex_decode(text: str) -> bytes:
    """
    Convert hex text into bytes.

    Args:
        text: Even-length string of hex digits (either case)

    Returns:
        Decoded bytes, one per digit pair

    Raises:
        HexDecodeError: If the length is odd or a digit is not hex
    """
    if len(text) % 2 != 0:
        raise HexDecodeError(f"Odd-length hex string ({len(text)} digits)")

    data = bytearray()
    for i in range(0, len(text), 2):
        pair = text[i : i + 2]

        # int(pair, 16) would also accept '+f', ' f' and '0x'
        if pair[0] not in HEX_DIGITS or pair[1] not in HEX_DIGITS:
            raise HexDecodeError(f"Invalid hex digits {pair!r} at offset {i}")

        data.append(int(pair, 16))

    return bytes(data)


def hex_encode(data: bytes) -> str:
    """Convert bytes into uppercase hex text."""
    return "".join(f"{byte:02X}" for byte in data)
