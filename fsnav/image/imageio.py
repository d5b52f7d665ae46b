"""Loading and saving images in any of the supported file formats."""

from __future__ import annotations

import os
from typing import BinaryIO, Callable

from .jpeg import check_jpeg, load_jpeg, save_jpeg
from .pixels import Image, ImageError, ImageFormat
from .png import check_png, load_png, save_png
from .ppm import check_ppm, load_ppm, save_ppm
from .rgbe import check_rgbe, load_rgbe, save_rgbe
from .tga import check_tga, load_tga, save_tga

_Handler = tuple[
    Callable[[BinaryIO], bool],
    Callable[[BinaryIO], Image],
    Callable[[BinaryIO, Image], None],
]

# Detection is tried in this order.
_HANDLERS: dict[ImageFormat, _Handler] = {
    ImageFormat.PNG: (check_png, load_png, save_png),
    ImageFormat.JPEG: (check_jpeg, load_jpeg, save_jpeg),
    ImageFormat.TGA: (check_tga, load_tga, save_tga),
    ImageFormat.PPM: (check_ppm, load_ppm, save_ppm),
    ImageFormat.RGBE: (check_rgbe, load_rgbe, save_rgbe),
}


def load_image(fname: str | os.PathLike) -> Image:
    """Load an image, detecting its format from the file contents."""
    try:
        fp = open(fname, "rb")
    except OSError as exc:
        raise ImageError(f"Image loading error: could not open file {os.fsdecode(fname)}") from exc
    with fp:
        for check, load, _save in _HANDLERS.values():
            if check(fp):
                return load(fp)
    raise ImageError(f"Image loading error: unrecognised format in {os.fsdecode(fname)}")


def _format_from_suffix(name: str) -> ImageFormat:
    dot = name.rfind(".")
    if dot != -1:
        suffix = name[dot:]
        for fmt in _HANDLERS:
            if fmt.suffix == suffix:
                return fmt
    raise ImageError(
        f"Image saving error: failed to infer filetype (unknown suffix in {name})"
    )


def save_image(
    fname: str | os.PathLike, image: Image, fmt: ImageFormat | int = ImageFormat.AUTO
) -> None:
    """Save an image; with AUTO the format is chosen from the file name suffix."""
    name = os.fsdecode(fname)
    try:
        fmt = ImageFormat(fmt)
    except ValueError as exc:
        raise ImageError(
            f"Image saving error: error saving {name}, invalid format specification"
        ) from exc
    if fmt is ImageFormat.AUTO:
        fmt = _format_from_suffix(name)

    _check, _load, save = _HANDLERS[fmt]
    try:
        fp = open(fname, "wb")
    except OSError as exc:
        raise ImageError(f"Image saving error: could not open file {name} for writing") from exc
    with fp:
        save(fp, image)