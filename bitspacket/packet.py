"""
Decoded BITS packets.

A packet is either a literal (leaf) or an operator over an ordered,
non-empty tuple of sub-packets. Packets are built once by the decoder
and never modified afterwards.

Type IDs:
- 0 Sum, 1 Product, 2 Minimum, 3 Maximum
- 4 Literal
- 5 Greater, 6 Less, 7 Equal
"""

# Import for type hints only
if False:  # noqa: SIM108
    from bitspacket.varint import Varint

TYPE_SUM = 0
TYPE_PRODUCT = 1
TYPE_MINIMUM = 2
TYPE_MAXIMUM = 3
TYPE_LITERAL = 4
TYPE_GREATER = 5
TYPE_LESS = 6
TYPE_EQUAL = 7

KIND_NAMES = {
    TYPE_SUM: "sum",
    TYPE_PRODUCT: "product",
    TYPE_MINIMUM: "minimum",
    TYPE_MAXIMUM: "maximum",
    TYPE_LITERAL: "literal",
    TYPE_GREATER: "greater",
    TYPE_LESS: "less",
    TYPE_EQUAL: "equal",
}

OPERATOR_TYPES = frozenset(KIND_NAMES) - {TYPE_LITERAL}
COMPARISON_TYPES = frozenset({TYPE_GREATER, TYPE_LESS, TYPE_EQUAL})


class Packet:
    """
    Common part of every packet: the 3-bit version.

    Abstract: only LiteralPacket and OperatorPacket are instantiated, and
    each defines type_id.
    """

    __slots__ = ("_version",)

    def __init__(self, version: int) -> None:
        if type(self) is Packet:
            raise TypeError("Packet is abstract, use LiteralPacket or OperatorPacket")
        self._version = version

    @property
    def version(self) -> int:
        return self._version

    @property
    def kind(self) -> str:
        """Lowercase name of the packet kind."""
        return KIND_NAMES[self.type_id]

    def sub_packets(self) -> "tuple[Packet, ...]":
        """Return the directly owned sub-packets (empty for literals)."""
        return ()


class LiteralPacket(Packet):
    """Leaf packet carrying a literal value."""

    __slots__ = ("_literal",)

    type_id = TYPE_LITERAL

    def __init__(self, version: int, literal: "Varint") -> None:
        """
        Initialize a literal packet.

        Args:
            version: Packet version (0-7)
            literal: Decoded literal value
        """
        super().__init__(version)
        self._literal = literal

    @property
    def literal(self) -> "Varint":
        return self._literal

    @property
    def value(self) -> int:
        return self._literal.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiteralPacket):
            return NotImplemented
        return self._version == other._version and self._literal == other._literal

    def __hash__(self) -> int:
        return hash((self._version, self._literal))

    def __repr__(self) -> str:
        return f"LiteralPacket(version={self._version}, value={self.value})"


class OperatorPacket(Packet):
    """Packet applying an operator to its sub-packets."""

    __slots__ = ("_type_id", "_children")

    def __init__(self, version: int, type_id: int, children) -> None:
        """
        Initialize an operator packet.

        Args:
            version: Packet version (0-7)
            type_id: One of the operator type IDs (anything but 4)
            children: Sub-packets in stream order

        Raises:
            ValueError: If type_id is not an operator type
        """
        if type_id not in OPERATOR_TYPES:
            raise ValueError(f"Not an operator type id: {type_id}")

        super().__init__(version)
        self._type_id = type_id
        self._children = tuple(children)

    @property
    def type_id(self) -> int:
        return self._type_id

    @property
    def children(self) -> "tuple[Packet, ...]":
        return self._children

    def sub_packets(self) -> "tuple[Packet, ...]":
        return self._children

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OperatorPacket):
            return NotImplemented
        return (
            self._version == other._version
            and self._type_id == other._type_id
            and self._children == other._children
        )

    def __hash__(self) -> int:
        return hash((self._version, self._type_id, self._children))

    def __repr__(self) -> str:
        return (
            f"OperatorPacket(version={self._version}, kind={self.kind!r}, "
            f"children={list(self._children)!r})"
        )


def format_tree(packet: Packet, indent: int = 0) -> str:
    """
    Render a packet tree as indented text, one packet per line.

    Args:
        packet: Root of the tree
        indent: Nesting level of the root

    Returns:
        Multi-line string without a trailing newline
    """
    lines = []
    pending = [(packet, indent)]

    while pending:
        node, level = pending.pop()
        pad = "  " * level
        if isinstance(node, LiteralPacket):
            lines.append(f"{pad}literal v{node.version} = {node.value}")
        else:
            lines.append(f"{pad}{node.kind} v{node.version}")
            pending.extend((child, level + 1) for child in reversed(node.sub_packets()))

    return "\n".join(lines)
