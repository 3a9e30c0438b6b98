#!/usr/bin/env python3
"""
Command-line front end for zxing-cpp barcode decoding and encoding.

Usage:
    zxcli <file_name> decode [-t] [-d] [-b FORMAT ...] [--json] [--raw]
    zxcli <file_name> encode FORMAT --width W --height H (-d DATA | --data-file PATH) [hints]

Example:
    zxcli hello.png encode QRCODE --width 200 --height 200 -d "hello"
    zxcli hello.png decode
"""

import argparse
import sys

from zxcli import __version__
from zxcli.commands import DecodeCommand, EncodeCommand, options_for
from zxcli.dispatch import run
from zxcli.errors import UsageError
from zxcli.formats import BarcodeFormat
from zxcli.hints import ENCODE_HINT_FIELDS

PDF417_COMPACTIONS = ("AUTO", "TEXT", "BYTE", "NUMERIC", "0", "1", "2", "3")


def barcode_format(text: str) -> BarcodeFormat:
    try:
        return BarcodeFormat.parse(text)
    except ValueError:
        names = ", ".join(f.name for f in BarcodeFormat)
        raise argparse.ArgumentTypeError(f"unknown barcode format '{text}' (choose from {names})")


def writable_format(text: str) -> BarcodeFormat:
    fmt = barcode_format(text)
    if not fmt.writable:
        names = ", ".join(sorted(f.name for f in BarcodeFormat if f.writable))
        raise argparse.ArgumentTypeError(f"{fmt} cannot be encoded (choose from {names})")
    return fmt


def boolean(text: str) -> bool:
    value = text.strip().lower()
    if value in ("true", "yes", "1", "on"):
        return True
    if value in ("false", "no", "0", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{text}'")


def unsigned(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number, got '{text}'")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return value


def ranged(lo: int, hi: int, as_text: bool = False):
    def check(text: str):
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected a whole number, got '{text}'")
        if not lo <= value <= hi:
            raise argparse.ArgumentTypeError(f"must be between {lo} and {hi}, got {value}")
        return str(value) if as_text else value
    return check


def _add_hint_arguments(p: argparse.ArgumentParser) -> None:
    hints = p.add_argument_group(
        "format hints",
        "Optional encoder settings. Each one only applies to some formats; "
        "giving one the chosen format does not use is an error.",
    )
    hints.add_argument("--error-correction", metavar="LEVEL",
                       help="Degree of error correction. QRCODE: L, M, Q or H. "
                            "AZTEC: minimal percentage of EC words (at least 25 is advised). "
                            "PDF417: 0 to 8.")
    hints.add_argument("--character-set", metavar="NAME",
                       help="Character encoding for the data, e.g. UTF-8 or ISO-8859-1.")
    hints.add_argument("--margin", metavar="PIXELS",
                       help="Margin (quiet zone) in pixels around the symbol.")
    hints.add_argument("--aztec-layers", type=ranged(-4, 32), metavar="N",
                       help="AZTEC layer count: -1..-4 for compact, 0 for the minimum, 1..32 for full size.")
    hints.add_argument("--pdf-417-compact", type=boolean, metavar="BOOL",
                       help="PDF417 compact mode.")
    hints.add_argument("--pdf-417-compaction", type=str.upper, choices=PDF417_COMPACTIONS,
                       metavar="MODE", help="PDF417 compaction: AUTO, TEXT, BYTE or NUMERIC (or 0-3).")
    hints.add_argument("--pdf-417-auto-eci", type=boolean, metavar="BOOL",
                       help="Insert ECIs automatically when encoding PDF417.")
    hints.add_argument("--qr-version", type=ranged(1, 40, as_text=True), metavar="N",
                       help="Exact QRCODE version, 1 to 40.")
    hints.add_argument("--qr-mask-pattern", type=ranged(0, 7, as_text=True), metavar="N",
                       help="QRCODE mask pattern, 0 to 7. Chosen automatically by default.")
    hints.add_argument("--qr-compact", type=boolean, metavar="BOOL",
                       help="QRCODE compact mode.")
    hints.add_argument("--gs1-format", type=boolean, metavar="BOOL",
                       help="Encode the data to the GS1 standard (QRCODE, DATAMATRIX, CODE128).")

    dm = hints.add_mutually_exclusive_group()
    dm.add_argument("--data-matrix-compact", type=boolean, metavar="BOOL",
                    help="DATAMATRIX compact mode; also enables GS1 FNC1 via the group separator.")
    dm.add_argument("--force-c40", type=boolean, metavar="BOOL",
                    help="Force C40 encoding for DATAMATRIX.")

    c128 = hints.add_mutually_exclusive_group()
    c128.add_argument("--code-128-compact", type=boolean, metavar="BOOL",
                      help="CODE128 compact mode, can give slightly smaller symbols.")
    c128.add_argument("--force-code-set", type=str.upper, choices=("A", "B", "C"),
                      help="Force the CODE128 code set.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zxcli",
        description="Decode barcodes from images or encode data into barcode images using zxing-cpp",
    )
    parser.add_argument("file_name",
                        help="Image to read (decode) or image to write (encode); "
                             "the output format follows the extension")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print verbose diagnostic output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True, metavar="{decode,encode}")

    dec = sub.add_parser("decode", help="Find and decode barcodes in an image")
    dec.add_argument("-t", "--try-harder", action="store_true",
                     help="Spend more time looking (rotated and downscaled passes)")
    dec.add_argument("-d", "--decode-multi", action="store_true",
                     help="Report every barcode in the image, not just the first")
    dec.add_argument("-b", "--barcode-types", type=barcode_format, action="extend", nargs="+",
                     metavar="FORMAT", help="Only look for these formats (repeatable)")
    dec.add_argument("--json", action="store_true", help="Output result as JSON")
    dec.add_argument("--raw", action="store_true",
                     help="Output raw bytes as hex instead of text")

    enc = sub.add_parser("encode", help="Write data into a barcode image")
    enc.add_argument("barcode_type", type=writable_format, metavar="FORMAT",
                     help="Barcode format to produce, e.g. QRCODE")
    enc.add_argument("--width", type=unsigned, required=True)
    enc.add_argument("--height", type=unsigned, required=True)
    enc.add_argument("-d", "--data", help="Data to encode")
    enc.add_argument("--data-file", help="File holding the data to encode")
    _add_hint_arguments(enc)

    return parser


def to_command(args: argparse.Namespace):
    """Turn parsed arguments into a DecodeCommand or EncodeCommand.

    Raises UsageError for combinations argparse cannot express.
    """
    if args.command == "decode":
        types = tuple(dict.fromkeys(args.barcode_types)) if args.barcode_types else None
        return DecodeCommand(
            file_name=args.file_name,
            try_harder=args.try_harder,
            decode_multi=args.decode_multi,
            barcode_types=types,
            as_json=args.json,
            raw=args.raw,
        )

    if args.data is None and args.data_file is None:
        raise UsageError("must provide either data string (-d/--data) or data file (--data-file)")
    if args.data is not None and args.data_file is not None:
        raise UsageError("provide only one of data string (-d/--data) or data file (--data-file)")

    values = {name: getattr(args, name) for name in ENCODE_HINT_FIELDS}
    return EncodeCommand(
        file_name=args.file_name,
        barcode_type=args.barcode_type,
        width=args.width,
        height=args.height,
        data=args.data,
        data_file=args.data_file,
        options=options_for(args.barcode_type, values),
    )


def parse_command(argv=None):
    """Parse ``argv`` into ``(command, verbose)``; usage errors exit with status 2."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return to_command(args), args.verbose
    except UsageError as e:
        parser.error(str(e))


def main(argv=None):
    cmd, verbose = parse_command(argv)
    sys.exit(run(cmd, verbose=verbose))


if __name__ == "__main__":
    main()
