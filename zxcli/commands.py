"""
Typed commands produced by the argument parser.

Encode options are split per barcode format: each record only has the
fields its format understands, so a QR version can never reach an Aztec
encoder. ``options_for`` picks the record for a format and rejects any
field that does not belong to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple, Type

from zxcli.errors import UsageError
from zxcli.formats import BarcodeFormat


@dataclass(frozen=True)
class EncodeOptions:
    """Options every writable format accepts."""

    margin: Optional[str] = None

    def set_fields(self) -> Dict[str, Any]:
        """Fields that were explicitly given, by name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _exclusive(options: EncodeOptions, first: str, second: str) -> None:
    if getattr(options, first) is not None and getattr(options, second) is not None:
        raise UsageError(f"{_flag(first)} cannot be used with {_flag(second)}")


@dataclass(frozen=True)
class AztecOptions(EncodeOptions):
    error_correction: Optional[str] = None
    character_set: Optional[str] = None
    aztec_layers: Optional[int] = None


@dataclass(frozen=True)
class DataMatrixOptions(EncodeOptions):
    character_set: Optional[str] = None
    data_matrix_compact: Optional[bool] = None
    force_c40: Optional[bool] = None
    gs1_format: Optional[bool] = None

    def __post_init__(self):
        _exclusive(self, "data_matrix_compact", "force_c40")


@dataclass(frozen=True)
class Pdf417Options(EncodeOptions):
    error_correction: Optional[str] = None
    character_set: Optional[str] = None
    pdf_417_compact: Optional[bool] = None
    pdf_417_compaction: Optional[str] = None
    pdf_417_auto_eci: Optional[bool] = None


@dataclass(frozen=True)
class QrCodeOptions(EncodeOptions):
    error_correction: Optional[str] = None
    character_set: Optional[str] = None
    qr_version: Optional[str] = None
    qr_mask_pattern: Optional[str] = None
    qr_compact: Optional[bool] = None
    gs1_format: Optional[bool] = None


@dataclass(frozen=True)
class Code128Options(EncodeOptions):
    gs1_format: Optional[bool] = None
    force_code_set: Optional[str] = None
    code_128_compact: Optional[bool] = None

    def __post_init__(self):
        _exclusive(self, "code_128_compact", "force_code_set")


OPTIONS_BY_FORMAT: Dict[BarcodeFormat, Type[EncodeOptions]] = {
    BarcodeFormat.AZTEC: AztecOptions,
    BarcodeFormat.DATAMATRIX: DataMatrixOptions,
    BarcodeFormat.PDF417: Pdf417Options,
    BarcodeFormat.QRCODE: QrCodeOptions,
    BarcodeFormat.CODE128: Code128Options,
}


def _flag(name: str) -> str:
    return "--" + name.replace("_", "-")


def options_for(barcode_type: BarcodeFormat, values: Dict[str, Any]) -> EncodeOptions:
    """Build the option record for ``barcode_type`` from the given values.

    ``None`` values are treated as not given. Raises UsageError when a
    given field does not apply to the format or two exclusive fields are
    both set.
    """
    cls = OPTIONS_BY_FORMAT.get(barcode_type, EncodeOptions)
    allowed = {f.name for f in fields(cls)}
    given = {k: v for k, v in values.items() if v is not None}
    for name in sorted(given):
        if name not in allowed:
            raise UsageError(f"{_flag(name)} does not apply to {barcode_type}")
    return cls(**given)


@dataclass(frozen=True)
class DecodeCommand:
    file_name: str
    try_harder: bool = False
    decode_multi: bool = False
    barcode_types: Optional[Tuple[BarcodeFormat, ...]] = None
    as_json: bool = False
    raw: bool = False


@dataclass(frozen=True)
class EncodeCommand:
    file_name: str
    barcode_type: BarcodeFormat
    width: int
    height: int
    data: Optional[str] = None
    data_file: Optional[str] = None
    options: EncodeOptions = field(default_factory=EncodeOptions)
