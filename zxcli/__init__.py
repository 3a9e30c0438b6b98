"""
Command-line barcode decoder and encoder built on zxing-cpp.

    zxcli photo.jpg decode --try-harder
    zxcli out.png encode QRCODE --width 200 --height 200 -d "hello"
"""

__version__ = "0.3.0"
