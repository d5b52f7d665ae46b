"""JFIF JPEG reading."""

from __future__ import annotations

from typing import BinaryIO

from PIL import Image as PILImage

from .pixels import Image, ImageError, pack_color24


def check_jpeg(fp: BinaryIO) -> bool:
    """Return whether the stream starts with a JFIF JPEG header."""
    fp.seek(0)
    sig = fp.read(10)
    if len(sig) < 10:
        return False
    if sig[:4] != b"\xff\xd8\xff\xe0":
        return False
    return sig[7:10] == b"FIF"


def load_jpeg(fp: BinaryIO) -> Image:
    """Load a JPEG image, converted to RGB."""
    fp.seek(0)
    try:
        with PILImage.open(fp) as img:
            rgb = img.convert("RGB")
            width, height = rgb.size
            data = rgb.tobytes()
    except (OSError, ValueError, SyntaxError) as exc:
        raise ImageError(f"load_jpeg: {exc}") from exc

    pixels = [pack_color24(r, g, b) for r, g, b in zip(*[iter(data)] * 3)]
    return Image.from_packed(width, height, pixels)


def save_jpeg(fp: BinaryIO, image: Image) -> None:
    """Saving JPEG files is not supported; always raises ImageError."""
    raise ImageError("saving jpeg files is not supported")