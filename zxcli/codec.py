"""
Thin boundary around zxing-cpp and Pillow.

Every call returns a result dict instead of raising, in the shape:
    - success: bool
    - error: str (error message if failed)
plus call-specific keys. Library exceptions never escape this module.

Decode results (one per symbol) carry:
    - text: str (decoded text)
    - bytes: list[int] (raw bytes)
    - format: str (BarcodeFormat name, e.g. QRCODE)
    - content_type: str
    - position: dict (corner points)
"""

import functools
import operator
import os
import stat
import sys
import tempfile
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

from zxcli.formats import BarcodeFormat
from zxcli.hints import DecodeHintType, EncodeHintType

# hint keys that reach the zxing-cpp writer or the canvas fitting
WRITER_HINTS = frozenset({
    EncodeHintType.MARGIN,
    EncodeHintType.ERROR_CORRECTION,
    EncodeHintType.CHARACTER_SET,
    EncodeHintType.QR_VERSION,
    EncodeHintType.QR_MASK_PATTERN,
    EncodeHintType.AZTEC_LAYERS,
    EncodeHintType.GS1_FORMAT,
})

QR_EC_LEVELS = ("L", "M", "Q", "H")

LINEAR_FORMATS = frozenset({
    BarcodeFormat.CODABAR,
    BarcodeFormat.CODE39,
    BarcodeFormat.CODE93,
    BarcodeFormat.CODE128,
    BarcodeFormat.EAN8,
    BarcodeFormat.EAN13,
    BarcodeFormat.ITF,
    BarcodeFormat.UPCA,
    BarcodeFormat.UPCE,
})


def _backend(result: dict):
    try:
        import zxingcpp
    except ImportError:
        result["error"] = "zxing-cpp not installed. Run: pip install zxing-cpp"
        return None
    return zxingcpp


def _load_image(image_path: str, result: dict, verbose: bool = False):
    try:
        img = Image.open(image_path)
        img.load()
        if verbose:
            print(f"Image loaded: {img.size[0]}x{img.size[1]}, mode={img.mode}", file=sys.stderr)
    except (OSError, ValueError) as e:
        result["error"] = f"Failed to load image: {e}"
        return None

    # zxing-cpp reads 8-bit grey or RGB
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
        if verbose:
            print("Converted to RGB", file=sys.stderr)
    return img


def reader_kwargs(hints: dict) -> dict:
    """Keyword arguments for ``zxingcpp.read_barcode(s)`` from a decode hint map."""
    kwargs = {}
    if hints.get(DecodeHintType.TRY_HARDER) is False:
        kwargs["try_rotate"] = False
        kwargs["try_downscale"] = False
    formats = hints.get(DecodeHintType.POSSIBLE_FORMATS)
    if formats:
        ordered = sorted(formats, key=lambda f: f.name)
        kwargs["formats"] = functools.reduce(operator.or_, (f.to_zxing() for f in ordered))
    return kwargs


def _format_name(fmt) -> str:
    try:
        return str(BarcodeFormat.from_zxing(fmt))
    except ValueError:
        return str(fmt)


def _position(barcode):
    pos = getattr(barcode, "position", None)
    if pos is None:
        return None
    return {
        "top_left": (pos.top_left.x, pos.top_left.y),
        "top_right": (pos.top_right.x, pos.top_right.y),
        "bottom_right": (pos.bottom_right.x, pos.bottom_right.y),
        "bottom_left": (pos.bottom_left.x, pos.bottom_left.y),
    }


def barcode_result(barcode) -> dict:
    raw = getattr(barcode, "bytes", None)
    return {
        "text": barcode.text,
        "bytes": list(raw) if raw is not None else None,
        "format": _format_name(barcode.format),
        "content_type": str(getattr(barcode, "content_type", "")) or None,
        "position": _position(barcode),
    }


def detect_in_file(image_path: str, hints: dict, verbose: bool = False) -> dict:
    """Decode the first barcode found in an image file."""
    result = {
        "success": False,
        "text": None,
        "bytes": None,
        "format": None,
        "content_type": None,
        "position": None,
        "error": None,
    }

    zxingcpp = _backend(result)
    if zxingcpp is None:
        return result
    img = _load_image(image_path, result, verbose)
    if img is None:
        return result

    kwargs = reader_kwargs(hints)
    if verbose:
        print(f"Scanning with {kwargs or 'library defaults'}", file=sys.stderr)

    try:
        barcode = zxingcpp.read_barcode(img, **kwargs)
    except Exception as e:
        result["error"] = f"zxing-cpp read error: {e}"
        return result

    if barcode is None or not getattr(barcode, "valid", True):
        result["error"] = "No barcode detected in image"
        return result

    result.update(barcode_result(barcode))
    result["success"] = True
    if verbose:
        print(f"Format: {result['format']}", file=sys.stderr)
        print(f"Content type: {result['content_type']}", file=sys.stderr)
    return result


def detect_multiple_in_file(image_path: str, hints: dict, verbose: bool = False) -> dict:
    """Decode every barcode found in an image file, in the order zxing-cpp reports them."""
    result = {"success": False, "results": [], "error": None}

    zxingcpp = _backend(result)
    if zxingcpp is None:
        return result
    img = _load_image(image_path, result, verbose)
    if img is None:
        return result

    try:
        barcodes = zxingcpp.read_barcodes(img, **reader_kwargs(hints))
    except Exception as e:
        result["error"] = f"zxing-cpp read error: {e}"
        return result

    barcodes = [b for b in barcodes if getattr(b, "valid", True)]
    if not barcodes:
        result["error"] = "No barcode detected in image"
        return result

    if verbose:
        print(f"Found {len(barcodes)} barcode(s)", file=sys.stderr)
    result["results"] = [barcode_result(b) for b in barcodes]
    result["success"] = True
    return result


def ec_level(value: str, barcode_type: BarcodeFormat) -> str:
    """
    Map an error correction hint onto zxing-cpp's ``ec_level`` option.

    QR codes take L/M/Q/H, Aztec takes the minimum percentage of EC words
    and PDF417 takes a level from 0 to 8.
    """
    text = value.strip().upper()
    if barcode_type is BarcodeFormat.QRCODE:
        if text not in QR_EC_LEVELS:
            raise ValueError(f"QRCODE error correction must be L, M, Q or H, got {value!r}")
        return text
    try:
        level = int(text.rstrip("%"))
    except ValueError:
        raise ValueError(f"invalid error correction {value!r} for {barcode_type}") from None
    if barcode_type is BarcodeFormat.AZTEC:
        if not 0 <= level <= 100:
            raise ValueError(f"Aztec error correction must be a percentage, got {value!r}")
        return f"{level}%"
    if not 0 <= level <= 8:
        raise ValueError(f"error correction level must be 0..8, got {value!r}")
    return str(level)


def aztec_version(layers: int):
    """zxing-cpp numbers Aztec sizes 1-4 compact, 5-36 full; 0 layers means no preference."""
    if layers == 0:
        return None
    return -layers if layers < 0 else layers + 4


def margin_pixels(hints: dict):
    margin = hints.get(EncodeHintType.MARGIN)
    if margin is None:
        return None
    try:
        pixels = int(margin)
    except ValueError:
        raise ValueError(f"margin must be a whole number of pixels, got {margin!r}") from None
    if pixels < 0:
        raise ValueError(f"margin must not be negative, got {margin!r}")
    return pixels


def writer_arguments(data: str, barcode_type: BarcodeFormat, hints: dict):
    """Split an encode hint map into (payload, create_barcode kwargs, ignored hint keys).

    The margin is not a writer option; ``fit_to_canvas`` applies it.
    """
    kwargs = {}
    payload = data

    ec = hints.get(EncodeHintType.ERROR_CORRECTION)
    if ec is not None:
        kwargs["ec_level"] = ec_level(ec, barcode_type)

    charset = hints.get(EncodeHintType.CHARACTER_SET)
    if charset is not None:
        try:
            payload = data.encode(charset)
        except LookupError:
            raise ValueError(f"unknown character set {charset!r}") from None
        except UnicodeEncodeError as e:
            raise ValueError(f"data cannot be encoded as {charset}: {e.reason}") from None

    if EncodeHintType.QR_VERSION in hints:
        kwargs["version"] = int(hints[EncodeHintType.QR_VERSION])
    if EncodeHintType.QR_MASK_PATTERN in hints:
        kwargs["data_mask"] = int(hints[EncodeHintType.QR_MASK_PATTERN])
    if EncodeHintType.AZTEC_LAYERS in hints:
        version = aztec_version(hints[EncodeHintType.AZTEC_LAYERS])
        if version is not None:
            kwargs["version"] = version
    if EncodeHintType.GS1_FORMAT in hints:
        kwargs["gs1"] = bool(hints[EncodeHintType.GS1_FORMAT])

    ignored = sorted((k for k in hints if k not in WRITER_HINTS), key=lambda k: k.name)
    return payload, kwargs, ignored


def fit_to_canvas(symbol, barcode_type: BarcodeFormat, width: int, height: int, margin=None):
    """
    Scale a rendered symbol by a whole factor and centre it on
    a white ``width`` x ``height`` canvas.

    With a margin the library's own quiet zone is cropped and ``margin``
    pixels are kept clear on every side instead. Linear symbols are
    stretched to the full height. The canvas grows when the symbol does not
    fit at the rendered size.
    """
    symbol = symbol.convert("L")
    pad = 0
    if margin is not None:
        bbox = ImageOps.invert(symbol).getbbox()
        if bbox is not None:
            symbol = symbol.crop(bbox)
        pad = margin

    if barcode_type in LINEAR_FORMATS:
        # one row of bars carries the whole symbol
        bbox = ImageOps.invert(symbol).getbbox()
        row = bbox[1] if bbox else 0
        symbol = symbol.crop((0, row, symbol.width, row + 1))

    w, h = symbol.size
    room_w, room_h = max(width - 2 * pad, 0), max(height - 2 * pad, 0)
    if barcode_type in LINEAR_FORMATS:
        factor = max(1, room_w // w)
        new_h = max(h, room_h)
    else:
        factor = max(1, min(room_w // w, room_h // h))
        new_h = h * factor
    symbol = symbol.resize((w * factor, new_h), Image.NEAREST)

    canvas_w = max(width, symbol.width + 2 * pad)
    canvas_h = max(height, symbol.height + 2 * pad)
    canvas = Image.new("L", (canvas_w, canvas_h), 255)
    canvas.paste(symbol, ((canvas_w - symbol.width) // 2, (canvas_h - symbol.height) // 2))
    return canvas


def encode(data: str, barcode_type: BarcodeFormat, width: int, height: int,
           hints: dict, verbose: bool = False) -> dict:
    """
    Render ``data`` as a barcode image of exactly ``width`` x ``height``
    (larger only when the symbol cannot fit).

    Returns dict with:
        - success: bool
        - image: PIL.Image.Image (if successful)
        - ignored: list[str] (hint names the writer has no option for)
        - error: str (error message if failed)
    """
    result = {"success": False, "image": None, "ignored": [], "error": None}

    zxingcpp = _backend(result)
    if zxingcpp is None:
        return result

    try:
        payload, kwargs, ignored = writer_arguments(data, barcode_type, hints)
        margin = margin_pixels(hints)
    except ValueError as e:
        result["error"] = str(e)
        return result
    result["ignored"] = [k.name for k in ignored]

    if verbose:
        print(f"Writing {barcode_type} {width}x{height} with {kwargs or 'library defaults'}",
              file=sys.stderr)

    try:
        barcode = zxingcpp.create_barcode(payload, barcode_type.to_zxing(), **kwargs)
        bitmap = zxingcpp.write_barcode_to_image(barcode)
        symbol = Image.fromarray(np.asarray(bitmap, dtype=np.uint8))
    except Exception as e:
        result["error"] = str(e) or type(e).__name__
        return result

    result["image"] = fit_to_canvas(symbol, barcode_type, width, height, margin)
    result["success"] = True
    return result


def _new_file_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_image(file_name: str, image) -> dict:
    """
    Write ``image`` to ``file_name``; the format comes from the extension.

    The image is written next to the target and moved into place, so a
    failed save leaves no partial file behind. A replaced file keeps its
    mode; a new one gets the usual umask-derived mode.
    """
    result = {"success": False, "path": file_name, "error": None}

    path = Path(file_name)
    fmt = Image.registered_extensions().get(path.suffix.lower())
    if fmt is None:
        result["error"] = f"unknown image format for extension '{path.suffix}'"
        return result

    tmp_name = None
    try:
        mode = _new_file_mode(path)
        with tempfile.NamedTemporaryFile(dir=path.parent, prefix=f".{path.name}.",
                                         suffix=".tmp", delete=False) as fh:
            tmp_name = fh.name
            image.save(fh, format=fmt)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
        tmp_name = None
    except (OSError, ValueError, KeyError) as e:
        result["error"] = str(e)
        return result
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    result["success"] = True
    return result
