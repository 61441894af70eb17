#!/usr/bin/env python3
"""
BITS packet decoder command line interface.

Decodes a hexadecimal BITS transmission and prints the sum of all packet
versions and the value of the expression it encodes.

Note: This CLI uses sys.argv instead of argparse, matching the small
fixed set of flags it accepts.

Usage:
    python cli.py [--tree] [--debug] <input>
    python cli.py [--tree] [--debug] -x <hex>

Examples:
    python cli.py transmission.txt        # decode first line of a file
    python cli.py -x D2FE28               # decode hex from the command line
    python cli.py --tree -x 38006F45291200
"""

import logging
import sys

from bitspacket import __version__, decode_hex, evaluate, version_sum
from bitspacket.errors import BitsError
from bitspacket.packet import format_tree

BANNER = """
  ____ ___ _____ ____
 | __ )_ _|_   _/ ___|
 |  _ \\| |  | | \\___ \\
 | |_) | |  | |  ___) |
 |____/___| |_| |____/

      packet decoder
"""


def print_version() -> None:
    """Print version information."""
    print(f"bitspacket {__version__}")


def print_help(prog_name: str) -> None:
    """Print help message."""
    print(BANNER)
    print(f"BITS Transmission Decoder (v{__version__})")
    print("=" * 33)
    print()
    print("Usage:")
    print(f"  {prog_name} [options] <input>")
    print(f"  {prog_name} [options] -x <hex>")
    print()
    print("Options:")
    print("  -x             Read the transmission from the command line")
    print("  --tree         Print the decoded packet tree")
    print("  --debug        Log decoding steps to stderr")
    print("  -h, --help     Show this help message")
    print("  -v, --version  Show version information")
    print()
    print("Arguments:")
    print("  input          File whose first line is the hex transmission")
    print("  hex            Hex transmission, e.g. D2FE28")
    print()
    print("Output:")
    print("  Packets:      number of top-level packets")
    print("  Version sum:  sum of the versions of every packet")
    print("  Value:        value of the first top-level packet")
    print()
    print("Examples:")
    print(f"  {prog_name} transmission.txt")
    print(f"  {prog_name} -x 9C0141080250320F1802104A08")
    print()


def read_transmission(input_path: str) -> "str | None":
    """Read the first line of an input file.

    Returns:
        The line without surrounding whitespace, or None on error.
    """
    try:
        with open(input_path, encoding="ascii") as f:
            line = f.readline()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read input file: {input_path} ({e})", file=sys.stderr)
        return None

    return line.strip()


def do_decode(text: str, show_tree: bool) -> int:
    """Decode a transmission and print the query results.

    Args:
        text: Hex transmission.
        show_tree: Also print the packet tree.

    Returns:
        0 on success, 1 on error.
    """
    if not text:
        print("Error: Transmission is empty", file=sys.stderr)
        return 1

    try:
        packets = decode_hex(text)
    except BitsError as e:
        print(f"Error: Decoding failed: {e}", file=sys.stderr)
        return 1

    if not packets:
        print("Error: Transmission contains no packets", file=sys.stderr)
        return 1

    if show_tree:
        for packet in packets:
            print(format_tree(packet))
        print()

    print(f"Packets:     {len(packets)}")
    print(f"Version sum: {version_sum(packets)}")
    print(f"Value:       {evaluate(packets[0])}")

    return 0


def main() -> int:
    """CLI entry point."""
    args = sys.argv
    prog_name = args[0] if args else "cli.py"

    # Check for help flag or no arguments
    if len(args) < 2:
        print_help(prog_name)
        return 1

    if args[1] in ("-h", "--help"):
        print_help(prog_name)
        return 0

    if args[1] in ("-v", "--version"):
        print_version()
        return 0

    # Strip option flags, leaving positional arguments
    show_tree = "--tree" in args[1:]
    debug = "--debug" in args[1:]
    hex_mode = "-x" in args[1:]
    rest = [a for a in args[1:] if a not in ("--tree", "--debug", "-x")]

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    unknown = [a for a in rest if a.startswith("-") and a != "-"]
    if unknown:
        print(f"Error: Unknown option: {unknown[0]}", file=sys.stderr)
        return 1

    if len(rest) != 1:
        print("Error: Expected exactly one input argument", file=sys.stderr)
        print(f"Usage: {prog_name} [options] <input> | -x <hex>", file=sys.stderr)
        return 1

    if hex_mode:
        text = rest[0].strip()
    else:
        text = read_transmission(rest[0])
        if text is None:
            return 1

    return do_decode(text, show_tree)


if __name__ == "__main__":
    sys.exit(main())
