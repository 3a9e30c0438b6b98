"""
Hint builder tests.

The encode hint map must hold exactly the keys for the fields that were
set, each with its fixed value type, whatever the format record.
"""

from dataclasses import fields

from hypothesis import given, settings, strategies as st

from zxcli.commands import (
    AztecOptions,
    Code128Options,
    DataMatrixOptions,
    EncodeOptions,
    OPTIONS_BY_FORMAT,
    Pdf417Options,
    QrCodeOptions,
)
from zxcli.formats import BarcodeFormat
from zxcli.hints import (
    DecodeHintType,
    ENCODE_HINT_FIELDS,
    EncodeHintType as H,
    build_decode_hints,
    build_encode_hints,
    describe,
)

EXPECTED_TYPES = {
    H.ERROR_CORRECTION: str,
    H.CHARACTER_SET: str,
    H.DATA_MATRIX_COMPACT: bool,
    H.MARGIN: str,
    H.PDF417_COMPACT: str,
    H.PDF417_COMPACTION: str,
    H.PDF417_AUTO_ECI: str,
    H.AZTEC_LAYERS: int,
    H.QR_VERSION: str,
    H.QR_MASK_PATTERN: str,
    H.QR_COMPACT: str,
    H.GS1_FORMAT: bool,
    H.FORCE_CODE_SET: str,
    H.FORCE_C40: bool,
    H.CODE128_COMPACT: bool,
}

FIELD_VALUES = {
    "error_correction": st.sampled_from(["L", "M", "Q", "H", "25", "4"]),
    "character_set": st.sampled_from(["UTF-8", "ISO-8859-1", "Shift_JIS"]),
    "data_matrix_compact": st.booleans(),
    "margin": st.integers(0, 40).map(str),
    "pdf_417_compact": st.booleans(),
    "pdf_417_compaction": st.sampled_from(["AUTO", "TEXT", "BYTE", "NUMERIC"]),
    "pdf_417_auto_eci": st.booleans(),
    "aztec_layers": st.integers(-4, 32),
    "qr_version": st.integers(1, 40).map(str),
    "qr_mask_pattern": st.integers(0, 7).map(str),
    "qr_compact": st.booleans(),
    "gs1_format": st.booleans(),
    "force_code_set": st.sampled_from(["A", "B", "C"]),
    "force_c40": st.booleans(),
    "code_128_compact": st.booleans(),
}

EXCLUSIVE = [("data_matrix_compact", "force_c40"), ("code_128_compact", "force_code_set")]

RECORDS = [EncodeOptions, *OPTIONS_BY_FORMAT.values()]


@st.composite
def option_values(draw):
    cls = draw(st.sampled_from(RECORDS))
    names = [f.name for f in fields(cls)]
    chosen = draw(st.lists(st.sampled_from(names), unique=True))
    values = {name: draw(FIELD_VALUES[name]) for name in chosen}
    for first, second in EXCLUSIVE:
        if first in values and second in values:
            del values[second]
    return cls, values


def test_every_option_field_has_a_hint():
    names = {f.name for cls in RECORDS for f in fields(cls)}
    assert names == set(ENCODE_HINT_FIELDS)
    assert {key for key, _ in ENCODE_HINT_FIELDS.values()} == set(H)


@settings(max_examples=200)
@given(option_values())
def test_hint_keys_match_set_fields(case):
    cls, values = case
    hints = build_encode_hints(cls(**values))
    assert set(hints) == {ENCODE_HINT_FIELDS[name][0] for name in values}


@settings(max_examples=200)
@given(option_values())
def test_hint_values_have_fixed_types(case):
    cls, values = case
    for key, value in build_encode_hints(cls(**values)).items():
        assert type(value) is EXPECTED_TYPES[key]


@given(option_values())
def test_hint_map_does_not_depend_on_field_order(case):
    cls, values = case
    forward = build_encode_hints(cls(**values))
    backward = build_encode_hints(cls(**dict(reversed(list(values.items())))))
    assert forward == backward


def test_empty_options_give_empty_map():
    assert build_encode_hints(QrCodeOptions()) == {}
    assert build_encode_hints(EncodeOptions()) == {}


def test_negative_aztec_layers_stay_signed():
    hints = build_encode_hints(AztecOptions(aztec_layers=-2))
    assert hints == {H.AZTEC_LAYERS: -2}


def test_gs1_format_stays_boolean():
    hints = build_encode_hints(DataMatrixOptions(gs1_format=True))
    assert hints[H.GS1_FORMAT] is True


def test_bools_rendered_as_text():
    hints = build_encode_hints(Pdf417Options(pdf_417_compact=True, pdf_417_auto_eci=False))
    assert hints == {H.PDF417_COMPACT: "true", H.PDF417_AUTO_ECI: "false"}
    assert build_encode_hints(QrCodeOptions(qr_compact=False)) == {H.QR_COMPACT: "false"}


def test_false_booleans_are_still_set():
    hints = build_encode_hints(Code128Options(code_128_compact=False))
    assert hints == {H.CODE128_COMPACT: False}


class TestDecodeHints:
    def test_try_harder_off_inserts_disable_hint(self):
        assert build_decode_hints(False) == {DecodeHintType.TRY_HARDER: False}

    def test_try_harder_on_omits_hint(self):
        assert build_decode_hints(True) == {}

    def test_possible_formats_deduplicated(self):
        hints = build_decode_hints(True, [BarcodeFormat.QRCODE, BarcodeFormat.AZTEC, BarcodeFormat.QRCODE])
        assert hints == {
            DecodeHintType.POSSIBLE_FORMATS: frozenset({BarcodeFormat.QRCODE, BarcodeFormat.AZTEC}),
        }

    def test_no_allow_list_no_formats_hint(self):
        assert DecodeHintType.POSSIBLE_FORMATS not in build_decode_hints(False, None)


def test_describe_is_sorted_and_readable():
    text = describe(build_decode_hints(False, [BarcodeFormat.QRCODE, BarcodeFormat.AZTEC]))
    assert text == "{POSSIBLE_FORMATS=[AZTEC, QRCODE], TRY_HARDER=False}"
    assert describe({}) == "{}"
