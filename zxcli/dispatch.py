"""
Run a parsed command and report the outcome on stdout.

Decode failures are reported but still exit 0; a scan that finds nothing
is an answer, not a crash. Input, encode and save failures exit 1.
"""

import json
import sys

from zxcli import codec
from zxcli.commands import DecodeCommand, EncodeCommand
from zxcli.errors import InputError
from zxcli.hints import build_decode_hints, build_encode_hints, describe
from zxcli.payload import resolve_payload

EXIT_OK = 0
EXIT_FAILURE = 1


def _render(result: dict, raw: bool) -> str:
    if raw and result["bytes"]:
        return "Bytes: " + " ".join(f"{b:02x}" for b in result["bytes"])
    return result["text"]


def decode_command(cmd: DecodeCommand, verbose: bool = False) -> int:
    if verbose:
        types = [str(t) for t in cmd.barcode_types] if cmd.barcode_types else None
        print(f"Decode '{cmd.file_name}' with: try_harder: {cmd.try_harder}, "
              f"decode_multi: {cmd.decode_multi}, barcode_types: {types}", file=sys.stderr)

    hints = build_decode_hints(cmd.try_harder, cmd.barcode_types)
    if verbose:
        print(f"Hints: {describe(hints)}", file=sys.stderr)

    if cmd.decode_multi:
        result = codec.detect_multiple_in_file(cmd.file_name, hints, verbose=verbose)
        if cmd.as_json:
            print(json.dumps(result, indent=2))
        elif result["success"]:
            print(f"Found {len(result['results'])} results")
            for i, found in enumerate(result["results"]):
                print(f"Result {i}: ({found['format']}) {_render(found, cmd.raw)}")
        else:
            print(f"Error while attempting to locate multiple barcodes in "
                  f"'{cmd.file_name}': {result['error']}")
        return EXIT_OK

    result = codec.detect_in_file(cmd.file_name, hints, verbose=verbose)
    if cmd.as_json:
        print(json.dumps(result, indent=2))
    elif result["success"]:
        print("Detection result:")
        print(f"({result['format']}) {_render(result, cmd.raw)}")
    else:
        print(f"Error while attempting to locate barcode in '{cmd.file_name}': {result['error']}")
    return EXIT_OK


def encode_command(cmd: EncodeCommand, verbose: bool = False) -> int:
    try:
        data = resolve_payload(cmd.data, cmd.data_file)
    except InputError as e:
        print(e)
        return EXIT_FAILURE

    hints = build_encode_hints(cmd.options)
    if verbose:
        print(f"Encode: file_name: {cmd.file_name}, barcode_type: {cmd.barcode_type}, "
              f"width: {cmd.width}, height: {cmd.height}, data: {cmd.data!r}, "
              f"data_file: {cmd.data_file!r}", file=sys.stderr)
        print(f"Hints: {describe(hints)}", file=sys.stderr)

    result = codec.encode(data, cmd.barcode_type, cmd.width, cmd.height, hints, verbose=verbose)
    for name in result["ignored"]:
        print(f"Warning: zxing-cpp writer has no setting for {name}, ignored", file=sys.stderr)
    if not result["success"]:
        print(f"Couldn't encode: {result['error']}")
        return EXIT_FAILURE

    print("Encode successful, saving...")
    saved = codec.save_image(cmd.file_name, result["image"])
    if not saved["success"]:
        print(f"Could not save '{cmd.file_name}': {saved['error']}")
        return EXIT_FAILURE
    print(f"Saved to '{cmd.file_name}'")
    return EXIT_OK


def run(cmd, verbose: bool = False) -> int:
    if isinstance(cmd, DecodeCommand):
        return decode_command(cmd, verbose=verbose)
    if isinstance(cmd, EncodeCommand):
        return encode_command(cmd, verbose=verbose)
    raise TypeError(f"unknown command: {cmd!r}")
