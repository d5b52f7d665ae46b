"""Truevision Targa (TGA) reading and writing of true-colour images."""

from __future__ import annotations

import struct
from typing import BinaryIO

from .pixels import (
    Image,
    ImageError,
    ImageOption,
    get_image_option,
    pack_color32,
    unpack_alpha,
    unpack_blue,
    unpack_green,
    unpack_red,
)

SIGNATURE = b"TRUEVISION-XFILE."
_FOOTER_SIZE = 18

# idlen, cmap_type, img_type, cmap_first, cmap_len, cmap_entry_sz,
# img_x, img_y, img_width, img_height, img_bpp, img_desc
_HEADER = struct.Struct("<BBBHHBHHHHBB")

_IMG_RGBA = 2
_IMG_RLE_CMAP = 9
_IMG_RLE_RGBA = 10

_ORIGIN_TOP = 0x20


def _is_rle(img_type: int) -> bool:
    return img_type >= _IMG_RLE_CMAP


def _is_rgba(img_type: int) -> bool:
    return img_type in (_IMG_RGBA, _IMG_RLE_RGBA)


def check_tga(fp: BinaryIO) -> bool:
    """Return whether the stream ends with the TGA 2.0 footer signature."""
    size = fp.seek(0, 2)
    if size < _FOOTER_SIZE:
        return False
    fp.seek(-_FOOTER_SIZE, 2)
    footer = fp.read(_FOOTER_SIZE)
    return footer[: len(SIGNATURE)] == SIGNATURE


class _ByteReader:
    """Byte cursor that reports end of data the way a C stream does."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0
        self.eof = False

    def getc(self) -> int:
        if self._pos >= len(self._data):
            self.eof = True
            return -1
        value = self._data[self._pos]
        self._pos += 1
        return value

    def pixel(self, read_alpha: bool) -> int:
        b = self.getc()
        g = self.getc()
        r = self.getc()
        a = self.getc() if read_alpha else 0xFF
        return pack_color32(a, r, g, b)


def load_tga(fp: BinaryIO) -> Image:
    """Load an uncompressed or run-length encoded true-colour TGA image."""
    fp.seek(0)
    raw_header = fp.read(_HEADER.size)
    if len(raw_header) < _HEADER.size:
        raise ImageError("load_tga: truncated header")
    (
        idlen,
        cmap_type,
        img_type,
        _cmap_first,
        cmap_len,
        cmap_entry_sz,
        _img_x,
        _img_y,
        width,
        height,
        _bpp,
        desc,
    ) = _HEADER.unpack(raw_header)

    if not _is_rgba(img_type):
        raise ImageError("only true color tga images supported")

    fp.seek(idlen, 1)
    if cmap_type == 1:
        fp.seek(cmap_len * cmap_entry_sz // 8, 1)

    reader = _ByteReader(fp.read())
    read_alpha = bool(desc & 0xF)
    rle = _is_rle(img_type)
    top_origin = bool(desc & _ORIGIN_TOP)

    pixels = [0] * (width * height)
    current = 0
    rle_mode = False
    rle_left = 0

    for i in range(height):
        row_start = (i if top_origin else height - (i + 1)) * width
        for j in range(width):
            if not rle:
                current = reader.pixel(read_alpha)
            elif rle_left:
                if not rle_mode:
                    current = reader.pixel(read_alpha)
                rle_left -= 1
            else:
                packet = reader.getc() & 0xFF
                rle_mode = bool(packet & 0x80)
                rle_left = packet & 0x7F
                current = reader.pixel(read_alpha)

            pixels[row_start + j] = current
            if reader.eof:
                break

    return Image.from_packed(width, height, pixels)


def save_tga(fp: BinaryIO, image: Image) -> None:
    """Write an uncompressed true-colour TGA image, with alpha if the ALPHA option is set."""
    alpha = get_image_option(ImageOption.ALPHA)
    if alpha:
        bpp, desc = 32, 8 | _ORIGIN_TOP
    else:
        bpp, desc = 24, _ORIGIN_TOP
    if get_image_option(ImageOption.INVERT):
        desc ^= _ORIGIN_TOP

    fp.write(
        _HEADER.pack(
            0, 0, _IMG_RGBA, 0, 0, 0, 0, 0,
            image.width & 0xFFFF, image.height & 0xFFFF, bpp, desc,
        )
    )

    body = bytearray()
    for p in image.packed():
        body += bytes((unpack_blue(p), unpack_green(p), unpack_red(p)))
        if alpha:
            body.append(unpack_alpha(p))
    fp.write(bytes(body))

    fp.write(struct.pack("<II", 0, 0))
    fp.write(SIGNATURE + b"\x00")