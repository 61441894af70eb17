"""
Bit-addressable reader for BITS transmissions.

This module provides sequential extraction of unsigned integer fields
from bytes. Fields may start at any bit offset and may span byte
boundaries.

Bit Ordering:
Bits are read MSB-first within each byte (big-endian at the bit level):
- First bit read is bit position 7 (MSB)
- Last bit read is bit position 0 (LSB)

Field Widths:
Every extraction targets one of two result widths, 8 or 16 bits. The
packet grammar only needs 1, 3, 5, 11 and 15 bit fields, all of which
fit in one of the two.
"""

U8 = 8
U16 = 16

WIDTHS = (U8, U16)


class BitReader:
    """Sequential bit reader from bytes."""

    def __init__(self, data: bytes) -> None:
        """
        Initialize a bit reader.

        Args:
            data: Bytes to read from
        """
        self._data = bytes(data)
        self._total_bits = len(self._data) * 8
        self._position = 0

    @property
    def position(self) -> int:
        """Bit offset of the next unread bit."""
        return self._position

    @property
    def remaining(self) -> int:
        """Number of bits remaining to read."""
        return self._total_bits - self._position

    def consume(self, count: int, width: int = U8) -> "int | None":
        """
        Read and consume `count` bits as an unsigned integer.

        Args:
            count: Number of bits to read (0 to width)
            width: Result width in bits, U8 or U16

        Returns:
            Integer value of the bits (MSB-first), or None if the data
            ends before `count` bits are available. The position is left
            unchanged on None.

        Raises:
            ValueError: If width is unsupported or count does not fit in it
        """
        if width not in WIDTHS:
            raise ValueError(f"Unsupported field width: {width}")
        if count < 0 or count > width:
            raise ValueError(f"Cannot read {count} bits into a {width}-bit field")

        offset = self._position
        result = 0
        consumed = 0

        while consumed < count:
            byte_index = offset // 8
            if byte_index >= len(self._data):
                return None

            bit_index = offset % 8
            read_bits = min(8 - bit_index, count - consumed)

            # MSB-first: the unread part of the byte sits below bit_index
            shift = 8 - bit_index - read_bits
            value = (self._data[byte_index] >> shift) & ((1 << read_bits) - 1)

            result = (result << read_bits) | value
            consumed += read_bits
            offset += read_bits

        self._position = offset
        return result

    def consume_u8(self, count: int) -> "int | None":
        """Read up to 8 bits. See consume()."""
        return self.consume(count, U8)

    def consume_u16(self, count: int) -> "int | None":
        """Read up to 16 bits. See consume()."""
        return self.consume(count, U16)

    def is_padding(self) -> bool:
        """
        Check whether every remaining bit is zero.

        Returns:
            True if no unread bit is set (also True when nothing remains)
        """
        if self.remaining == 0:
            return True

        byte_index = self._position // 8
        bit_index = self._position % 8

        if self._data[byte_index] & (0xFF >> bit_index):
            return False

        return not any(self._data[byte_index + 1 :])
