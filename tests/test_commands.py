import pytest

from zxcli.commands import (
    AztecOptions,
    Code128Options,
    DataMatrixOptions,
    EncodeOptions,
    QrCodeOptions,
    options_for,
)
from zxcli.errors import UsageError
from zxcli.formats import BarcodeFormat


def test_picks_record_for_format():
    opts = options_for(BarcodeFormat.QRCODE, {"qr_version": "5", "margin": None})
    assert opts == QrCodeOptions(qr_version="5")


def test_plain_record_for_formats_without_hints():
    opts = options_for(BarcodeFormat.EAN13, {"margin": "4"})
    assert type(opts) is EncodeOptions
    assert opts.margin == "4"


def test_rejects_field_of_another_format():
    with pytest.raises(UsageError, match="--qr-version does not apply to AZTEC"):
        options_for(BarcodeFormat.AZTEC, {"qr_version": "3"})


def test_rejects_hint_on_linear_format():
    with pytest.raises(UsageError, match="--error-correction does not apply to CODE39"):
        options_for(BarcodeFormat.CODE39, {"error_correction": "L"})


def test_none_values_are_not_given():
    opts = options_for(BarcodeFormat.AZTEC, {"qr_version": None, "aztec_layers": -2})
    assert opts == AztecOptions(aztec_layers=-2)


def test_set_fields_only_reports_given_values():
    assert QrCodeOptions(qr_compact=False).set_fields() == {"qr_compact": False}


@pytest.mark.parametrize("cls, kwargs", [
    (Code128Options, {"code_128_compact": True, "force_code_set": "B"}),
    (DataMatrixOptions, {"data_matrix_compact": True, "force_c40": False}),
])
def test_exclusive_compaction_fields(cls, kwargs):
    with pytest.raises(UsageError, match="cannot be used with"):
        cls(**kwargs)
