"""Binary PPM (P6) reading and PPM writing."""

from __future__ import annotations

import re
from typing import BinaryIO

from .pixels import (
    Image,
    ImageError,
    ImageOption,
    get_image_option,
    pack_color24,
    unpack_blue,
    unpack_green,
    unpack_red,
)

_TOKEN_LIMIT = 63
_LEADING_DIGITS = re.compile(rb"\d+")


def check_ppm(fp: BinaryIO) -> bool:
    """Return whether the stream starts with the binary PPM magic."""
    fp.seek(0)
    return fp.read(2) == b"P6"


def _read_token(fp: BinaryIO) -> bytes:
    """Read one header token, skipping comments and trailing whitespace."""
    token = bytearray()
    while True:
        c = fp.read(1)
        if not c or c.isspace() or len(token) >= _TOKEN_LIMIT:
            break
        if c == b"#":
            while True:
                c = fp.read(1)
                if not c or c in (b"\n", b"\r"):
                    break
            c = fp.read(1)
            if not c:
                break
            if c in (b"\n", b"\r"):
                continue
        token += c

    while True:
        c = fp.read(1)
        if not c:
            break
        if not c.isspace():
            fp.seek(-1, 1)
            break
    return bytes(token)


def _read_number(fp: BinaryIO, what: str) -> int:
    token = _read_token(fp)
    if not token:
        raise ImageError(f"load_ppm: missing {what}")
    match = _LEADING_DIGITS.match(token)
    if not match:
        raise ImageError(f"load_ppm: invalid {what}: {token.decode('latin-1')}")
    return int(match.group())


def load_ppm(fp: BinaryIO) -> Image:
    """Load a binary PPM image with a maximum value of 255."""
    fp.seek(0)
    _read_token(fp)

    width = _read_number(fp, "width")
    height = _read_number(fp, "height")
    try:
        maxval = _read_number(fp, "max value")
    except ImageError as exc:
        raise ImageError(f"load_ppm: invalid or unsupported max value: {exc}") from exc
    if maxval != 255:
        raise ImageError(f"load_ppm: invalid or unsupported max value: {maxval}")

    count = width * height
    data = fp.read(count * 3)
    if len(data) < count * 3:
        raise ImageError("load_ppm: EOF while reading pixel data")

    triples = zip(*[iter(data)] * 3)
    pixels = [pack_color24(r, g, b) for r, g, b in triples]
    return Image.from_packed(width, height, pixels)


def save_ppm(fp: BinaryIO, image: Image) -> None:
    """Write an image as PPM: text (P3) with the TEXT option, binary (P6) otherwise."""
    text = get_image_option(ImageOption.TEXT)
    invert = get_image_option(ImageOption.INVERT)

    fp.write(f"P{3 if text else 6}\n{image.width} {image.height}\n255\n".encode("ascii"))
    for row in image.rows(invert=invert):
        channels = [(unpack_red(p), unpack_green(p), unpack_blue(p)) for p in row]
        if text:
            fp.write("".join(f"{r} {g} {b}\n" for r, g, b in channels).encode("ascii"))
        else:
            fp.write(bytes(v for rgb in channels for v in rgb))