"""
Hint maps handed to the codec.

A hint map only holds the keys the caller asked for; a missing key means
"use the codec default".
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Union

from zxcli.commands import EncodeOptions
from zxcli.formats import BarcodeFormat


class DecodeHintType(Enum):
    TRY_HARDER = "try_harder"
    POSSIBLE_FORMATS = "possible_formats"


class EncodeHintType(Enum):
    ERROR_CORRECTION = "error_correction"
    CHARACTER_SET = "character_set"
    DATA_MATRIX_COMPACT = "data_matrix_compact"
    MARGIN = "margin"
    PDF417_COMPACT = "pdf417_compact"
    PDF417_COMPACTION = "pdf417_compaction"
    PDF417_AUTO_ECI = "pdf417_auto_eci"
    AZTEC_LAYERS = "aztec_layers"
    QR_VERSION = "qr_version"
    QR_MASK_PATTERN = "qr_mask_pattern"
    QR_COMPACT = "qr_compact"
    GS1_FORMAT = "gs1_format"
    FORCE_CODE_SET = "force_code_set"
    FORCE_C40 = "force_c40"
    CODE128_COMPACT = "code128_compact"


DecodeHintValue = Union[bool, FrozenSet[BarcodeFormat]]
EncodeHintValue = Union[str, bool, int]
DecodeHints = Dict[DecodeHintType, DecodeHintValue]
EncodeHints = Dict[EncodeHintType, EncodeHintValue]


def bool_text(value: bool) -> str:
    return "true" if value else "false"


# option field -> (hint key, coercion)
ENCODE_HINT_FIELDS = {
    "error_correction": (EncodeHintType.ERROR_CORRECTION, str),
    "character_set": (EncodeHintType.CHARACTER_SET, str),
    "data_matrix_compact": (EncodeHintType.DATA_MATRIX_COMPACT, bool),
    "margin": (EncodeHintType.MARGIN, str),
    "pdf_417_compact": (EncodeHintType.PDF417_COMPACT, bool_text),
    "pdf_417_compaction": (EncodeHintType.PDF417_COMPACTION, str),
    "pdf_417_auto_eci": (EncodeHintType.PDF417_AUTO_ECI, bool_text),
    "aztec_layers": (EncodeHintType.AZTEC_LAYERS, int),
    "qr_version": (EncodeHintType.QR_VERSION, str),
    "qr_mask_pattern": (EncodeHintType.QR_MASK_PATTERN, str),
    "qr_compact": (EncodeHintType.QR_COMPACT, bool_text),
    "gs1_format": (EncodeHintType.GS1_FORMAT, bool),
    "force_code_set": (EncodeHintType.FORCE_CODE_SET, str),
    "force_c40": (EncodeHintType.FORCE_C40, bool),
    "code_128_compact": (EncodeHintType.CODE128_COMPACT, bool),
}


def build_encode_hints(options: EncodeOptions) -> EncodeHints:
    """Turn the explicitly set fields of ``options`` into an encode hint map."""
    hints: EncodeHints = {}
    for name, value in options.set_fields().items():
        key, coerce = ENCODE_HINT_FIELDS[name]
        hints[key] = coerce(value)
    return hints


def build_decode_hints(try_harder: bool,
                       barcode_types: Optional[Iterable[BarcodeFormat]] = None) -> DecodeHints:
    """Decode hints for the reader.

    Try-harder is the codec default, so the hint is only present to turn it
    off. The format allow-list is deduplicated.
    """
    hints: DecodeHints = {}
    if not try_harder:
        hints[DecodeHintType.TRY_HARDER] = False
    if barcode_types is not None:
        hints[DecodeHintType.POSSIBLE_FORMATS] = frozenset(barcode_types)
    return hints


def describe(hints) -> str:
    """One-line rendering of a hint map for verbose output."""
    if not hints:
        return "{}"
    parts = []
    for key in sorted(hints, key=lambda k: k.name):
        value = hints[key]
        if isinstance(value, frozenset):
            value = "[" + ", ".join(sorted(str(v) for v in value)) + "]"
        parts.append(f"{key.name}={value}")
    return "{" + ", ".join(parts) + "}"
