"""Tests for packet decoding."""

import pytest

import bitspacket.decode as decode_module
from bitspacket.bitreader import BitReader
from bitspacket.decode import decode_hex, decode_packet, decode_packets
from bitspacket.errors import (
    ComparisonArityError,
    EmptyOperatorError,
    HexDecodeError,
    LengthMismatchError,
    PacketDecodeError,
    TruncatedPacketError,
    UnknownPacketTypeError,
    VarintOverflowError,
)
from bitspacket.evaluate import evaluate, version_sum
from bitspacket.packet import (
    TYPE_GREATER,
    TYPE_LESS,
    TYPE_MAXIMUM,
    TYPE_SUM,
    LiteralPacket,
    OperatorPacket,
    format_tree,
)
from bitspacket.varint import Varint


def to_bytes(bits: str) -> bytes:
    """Pack a '0'/'1' string MSB-first, zero-filling the last byte."""
    bits = bits + "0" * (-len(bits) % 8)
    return bytes(int(bits[i : i + 8], 2) for i in range(0, len(bits), 8))


def literal_bits(version: int, value: int) -> str:
    """Bit string of a literal packet."""
    nibbles = f"{value:x}"
    groups = ["1" + f"{int(n, 16):04b}" for n in nibbles]
    groups[-1] = "0" + groups[-1][1:]
    return f"{version:03b}100" + "".join(groups)


def count_operator_bits(version: int, type_id: int, children: list) -> str:
    """Bit string of an operator packet using the packet count length mode."""
    return f"{version:03b}{type_id:03b}1{len(children):011b}" + "".join(children)


def total_operator_bits(version: int, type_id: int, children: list) -> str:
    """Bit string of an operator packet using the total bits length mode."""
    body = "".join(children)
    return f"{version:03b}{type_id:03b}0{len(body):015b}" + body


class TestDecodeLiteral:
    """Test literal packets."""

    def test_literal_2021(self) -> None:
        """Test the D2FE28 literal packet."""
        packets = decode_hex("D2FE28")
        assert packets == [LiteralPacket(6, Varint(2021, 3))]

    def test_decode_packet_position(self) -> None:
        """Test decode_packet leaves the reader after the packet."""
        reader = BitReader(bytes.fromhex("D2FE28"))
        packet = decode_packet(reader)
        assert packet.value == 2021
        assert reader.position == 21

    def test_literal_overflow(self) -> None:
        """Test an oversized literal fails the decode."""
        bits = "000100" + "10001" + "11111" * 15 + "01111"
        with pytest.raises(VarintOverflowError):
            decode_packets(to_bytes(bits))


class TestDecodeOperator:
    """Test operator packets."""

    def test_total_bits_mode(self) -> None:
        """Test 38006F45291200: Less with two literals, total bits mode."""
        packets = decode_hex("38006F45291200")
        assert len(packets) == 1

        root = packets[0]
        assert isinstance(root, OperatorPacket)
        assert root.version == 1
        assert root.type_id == TYPE_LESS
        assert [child.value for child in root.children] == [10, 20]
        assert all(isinstance(child, LiteralPacket) for child in root.children)

        # Length type bit follows the 6 header bits
        reader = BitReader(bytes.fromhex("38006F45291200"))
        reader.consume(6)
        assert reader.consume(1) == 0
        assert reader.consume_u16(15) == 27

    def test_packet_count_mode(self) -> None:
        """Test EE00D40C823060: Maximum with three literals, count mode."""
        packets = decode_hex("EE00D40C823060")
        assert len(packets) == 1

        root = packets[0]
        assert root.version == 7
        assert root.type_id == TYPE_MAXIMUM
        assert [child.value for child in root.children] == [1, 2, 3]

    def test_nested_operators(self) -> None:
        """Test operators nest inside both length modes."""
        inner = count_operator_bits(2, TYPE_SUM, [literal_bits(1, 5), literal_bits(1, 7)])
        outer = total_operator_bits(3, TYPE_GREATER, [inner, literal_bits(0, 1)])
        packets = decode_packets(to_bytes(outer))

        expected = OperatorPacket(
            3,
            TYPE_GREATER,
            [
                OperatorPacket(
                    2,
                    TYPE_SUM,
                    [LiteralPacket(1, Varint(5, 1)), LiteralPacket(1, Varint(7, 1))],
                ),
                LiteralPacket(0, Varint(1, 1)),
            ],
        )
        assert packets == [expected]

    def test_length_mismatch(self) -> None:
        """Test a sub-packet running past the total bit length."""
        bits = f"000000{0:01b}{5:015b}" + literal_bits(0, 1)
        with pytest.raises(LengthMismatchError):
            decode_packets(to_bytes(bits))

    def test_empty_operator(self) -> None:
        """Test an operator with zero sub-packets is rejected."""
        bits = count_operator_bits(0, TYPE_SUM, [])
        with pytest.raises(EmptyOperatorError):
            decode_packets(to_bytes(bits))

    @pytest.mark.parametrize("count", [1, 3])
    def test_comparison_arity(self, count: int) -> None:
        """Test comparisons need exactly two sub-packets."""
        bits = count_operator_bits(0, TYPE_GREATER, [literal_bits(0, 1)] * count)
        with pytest.raises(ComparisonArityError):
            decode_packets(to_bytes(bits))

    def test_unknown_type_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a type id outside the operator set is rejected."""
        monkeypatch.setattr(
            decode_module, "OPERATOR_TYPES", frozenset({0, 1, 2, 3, 5, 6})
        )
        with pytest.raises(UnknownPacketTypeError):
            decode_hex("9C005AC2F8F0")


class TestDecodeTransmission:
    """Test top-level decoding and termination."""

    def test_exact_boundary(self) -> None:
        """Test a stream ending exactly at a packet boundary."""
        packets = decode_hex("3222")
        assert packets == [LiteralPacket(1, Varint(0x12, 2))]

    def test_zero_padding_shorter_than_header(self) -> None:
        """Test trailing zero bits end the transmission."""
        packets = decode_hex("F020")
        assert packets == [LiteralPacket(7, Varint(1, 1))]

    def test_partial_header_after_literal(self) -> None:
        """Test a set bit in fewer than six trailing bits fails the decode."""
        with pytest.raises(TruncatedPacketError, match="type id") as excinfo:
            decode_hex("D2FE2F")
        assert excinfo.value.position == 24

    def test_partial_header(self) -> None:
        """Test five leftover data bits are an incomplete header."""
        with pytest.raises(TruncatedPacketError) as excinfo:
            decode_hex("F03F")
        assert excinfo.value.position == 14

    def test_truncated_operator(self) -> None:
        """Test a stream ending one bit before the packet does."""
        with pytest.raises(TruncatedPacketError):
            decode_hex("38006F452912")

    def test_multiple_top_level(self) -> None:
        """Test several packets back to back."""
        bits = literal_bits(7, 1) + literal_bits(1, 0x12) + literal_bits(0, 3)
        packets = decode_packets(to_bytes(bits))
        assert [p.version for p in packets] == [7, 1, 0]
        assert [p.value for p in packets] == [1, 0x12, 3]

    def test_empty(self) -> None:
        """Test empty input has no packets."""
        assert decode_packets(b"") == []
        assert decode_hex("") == []

    def test_all_zero(self) -> None:
        """Test input with no set bit has no packets."""
        assert decode_hex("0000") == []

    def test_whitespace_stripped(self) -> None:
        """Test a trailing newline is ignored."""
        assert decode_hex("D2FE28\n") == decode_hex("D2FE28")

    def test_invalid_hex(self) -> None:
        """Test malformed hex fails before decoding."""
        with pytest.raises(HexDecodeError):
            decode_hex("D2FE2")

    def test_errors_share_base(self) -> None:
        """Test decode failures derive from PacketDecodeError."""
        with pytest.raises(PacketDecodeError):
            decode_hex("F03F")


class TestDecodeLarge:
    """Test large transmissions."""

    @pytest.mark.slow
    def test_max_packet_count(self) -> None:
        """Test an operator with the largest 11-bit packet count."""
        children = [literal_bits(i % 8, i) for i in range(2047)]
        packets = decode_packets(to_bytes(count_operator_bits(0, TYPE_SUM, children)))
        assert len(packets[0].children) == 2047
        assert packets[0].children[-1].value == 2046

    @pytest.mark.slow
    def test_deep_nesting(self) -> None:
        """Test a deeply nested chain of operators."""
        bits = literal_bits(1, 9)
        for _ in range(200):
            bits = count_operator_bits(1, TYPE_MAXIMUM, [bits])
        packets = decode_packets(to_bytes(bits))

        depth = 0
        packet = packets[0]
        while isinstance(packet, OperatorPacket):
            packet = packet.children[0]
            depth += 1
        assert depth == 200
        assert packet.value == 9

    @pytest.mark.slow
    def test_nesting_beyond_recursion_limit(self) -> None:
        """Test nesting deeper than the interpreter recursion limit."""
        bits = literal_bits(1, 9)
        for _ in range(2000):
            bits = count_operator_bits(1, TYPE_MAXIMUM, [bits])
        packets = decode_packets(to_bytes(bits))

        assert evaluate(packets[0]) == 9
        assert version_sum(packets) == 2001
        assert len(format_tree(packets[0]).splitlines()) == 2001

    @pytest.mark.slow
    def test_nesting_total_bits_mode(self) -> None:
        """Test deep nesting where every operator gives a total bit length."""
        bits = literal_bits(0, 4)
        for _ in range(1200):
            bits = total_operator_bits(0, TYPE_SUM, [bits])
        packets = decode_packets(to_bytes(bits))

        assert evaluate(packets[0]) == 4
        assert version_sum(packets) == 0
