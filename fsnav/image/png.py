"""PNG reading and writing of RGB and RGBA images."""

from __future__ import annotations

from typing import BinaryIO

from PIL import Image as PILImage
from PIL.PngImagePlugin import PngInfo

from .pixels import (
    Image,
    ImageError,
    ImageOption,
    get_image_option,
    pack_color24,
    pack_color32,
    unpack_alpha,
    unpack_blue,
    unpack_green,
    unpack_red,
)

SIGNATURE = b"\x89PNG\r\n\x1a\n"
SOFTWARE_TEXT = "libimago"


def check_png(fp: BinaryIO) -> bool:
    """Return whether the stream starts with the PNG signature."""
    fp.seek(0)
    return fp.read(len(SIGNATURE)) == SIGNATURE


def load_png(fp: BinaryIO) -> Image:
    """Load an 8-bit RGB or RGBA PNG image; other colour types are rejected."""
    fp.seek(0)
    try:
        with PILImage.open(fp) as img:
            img.load()
            mode = img.mode
            width, height = img.size
            if mode not in ("RGB", "RGBA"):
                raise ImageError(f"load_png: unsupported color type: {mode}")
            data = img.tobytes()
    except ImageError:
        raise
    except (OSError, ValueError, SyntaxError) as exc:
        raise ImageError(f"load_png: {exc}") from exc

    if mode == "RGB":
        pixels = [pack_color24(r, g, b) for r, g, b in zip(*[iter(data)] * 3)]
    else:
        pixels = [pack_color32(a, r, g, b) for r, g, b, a in zip(*[iter(data)] * 4)]
    return Image.from_packed(width, height, pixels)


def save_png(fp: BinaryIO, image: Image) -> None:
    """Write an image as PNG, RGBA with the ALPHA option, RGB otherwise."""
    alpha = get_image_option(ImageOption.ALPHA)
    invert = get_image_option(ImageOption.INVERT)

    body = bytearray()
    for row in image.rows(invert=invert):
        for p in row:
            body += bytes((unpack_red(p), unpack_green(p), unpack_blue(p)))
            if alpha:
                body.append(unpack_alpha(p))

    info = PngInfo()
    info.add_text("Software", SOFTWARE_TEXT)
    try:
        img = PILImage.frombytes("RGBA" if alpha else "RGB", (image.width, image.height), bytes(body))
        img.save(fp, format="PNG", pnginfo=info)
    except (OSError, ValueError, SystemError) as exc:
        raise ImageError(f"save_png: {exc}") from exc