"""
Exceptions raised while decoding BITS transmissions.

Every data error derives from BitsError, so callers that only need to
know "this transmission is bad" can catch a single type. Decode errors
remember the bit offset at which they were detected.
"""


class BitsError(Exception):
    """Base class for all transmission errors."""


class HexDecodeError(BitsError, ValueError):
    """Transmission text is not an even-length run of hex digits."""


class EmptyTransmissionError(BitsError):
    """Transmission holds no packet to evaluate."""


class PacketDecodeError(BitsError):
    """A packet could not be decoded from the bit stream."""

    def __init__(self, message: str, position: "int | None" = None) -> None:
        """
        Initialize a decode error.

        Args:
            message: Description of the failure
            position: Bit offset where the failure was detected
        """
        if position is not None:
            message = f"{message} (at bit {position})"
        super().__init__(message)
        self.position = position


class TruncatedPacketError(PacketDecodeError):
    """Stream ended in the middle of a packet field."""


class VarintOverflowError(PacketDecodeError):
    """Literal value does not fit in 64 bits."""


class UnknownPacketTypeError(PacketDecodeError):
    """Type id outside the packet grammar."""


class LengthMismatchError(PacketDecodeError):
    """Sub-packets overran the declared total bit length."""


class EmptyOperatorError(PacketDecodeError):
    """Operator packet carries no sub-packets."""


class ComparisonArityError(PacketDecodeError):
    """Comparison packet does not carry exactly two sub-packets."""
