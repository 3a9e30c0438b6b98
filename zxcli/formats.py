"""
Barcode symbologies known to the command line.

Each member's value is the name of the matching ``zxingcpp.BarcodeFormat``
attribute, so the binding is only touched when a format is handed to it.
"""

from enum import Enum


def _normalize(name: str) -> str:
    return "".join(ch for ch in name.upper() if ch not in "_- ")


class BarcodeFormat(Enum):
    AZTEC = "Aztec"
    CODABAR = "Codabar"
    CODE39 = "Code39"
    CODE93 = "Code93"
    CODE128 = "Code128"
    DATABAR = "DataBar"
    DATABAREXPANDED = "DataBarExpanded"
    DATABARLIMITED = "DataBarLimited"
    DATAMATRIX = "DataMatrix"
    DXFILMEDGE = "DXFilmEdge"
    EAN8 = "EAN8"
    EAN13 = "EAN13"
    ITF = "ITF"
    MAXICODE = "MaxiCode"
    MICROQRCODE = "MicroQRCode"
    PDF417 = "PDF417"
    QRCODE = "QRCode"
    RMQRCODE = "RMQRCode"
    UPCA = "UPCA"
    UPCE = "UPCE"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, name: str) -> "BarcodeFormat":
        """Look up a format by name, ignoring case, '_', '-' and spaces.

        Raises ValueError for unknown names, which argparse reports as
        an invalid choice when this is used as an argument ``type``.
        """
        key = _normalize(name)
        key = _ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown barcode format: {name!r}") from None

    @classmethod
    def from_zxing(cls, fmt) -> "BarcodeFormat":
        """Map a ``zxingcpp.BarcodeFormat`` member back to this enum."""
        name = getattr(fmt, "name", None) or str(fmt).replace("BarcodeFormat.", "")
        return cls.parse(name)

    @property
    def writable(self) -> bool:
        return self in WRITABLE_FORMATS

    def to_zxing(self):
        import zxingcpp

        return getattr(zxingcpp.BarcodeFormat, self.value)


_ALIASES = {
    "RSS14": "DATABAR",
    "RSSEXPANDED": "DATABAREXPANDED",
    "RECTANGULARMICROQRCODE": "RMQRCODE",
}

WRITABLE_FORMATS = frozenset({
    BarcodeFormat.AZTEC,
    BarcodeFormat.CODABAR,
    BarcodeFormat.CODE39,
    BarcodeFormat.CODE93,
    BarcodeFormat.CODE128,
    BarcodeFormat.DATAMATRIX,
    BarcodeFormat.EAN8,
    BarcodeFormat.EAN13,
    BarcodeFormat.ITF,
    BarcodeFormat.PDF417,
    BarcodeFormat.QRCODE,
    BarcodeFormat.UPCA,
    BarcodeFormat.UPCE,
})
