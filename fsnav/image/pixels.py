"""Packed 32-bit pixels, image options and the in-memory image type."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator


class ImageError(Exception):
    """Raised when an image cannot be read or written."""


class ImageFormat(enum.IntEnum):
    """Supported image file formats."""

    AUTO = 0
    PNG = 1
    JPEG = 2
    TGA = 3
    PPM = 4
    RGBE = 5

    @property
    def suffix(self) -> str | None:
        """The file name suffix of the format, or None for AUTO."""
        return _SUFFIXES.get(self)


_SUFFIXES = {
    ImageFormat.PNG: ".png",
    ImageFormat.JPEG: ".jpg",
    ImageFormat.TGA: ".tga",
    ImageFormat.PPM: ".ppm",
    ImageFormat.RGBE: ".rgbe",
}


class ImageOption(enum.IntEnum):
    """Load and save options."""

    ALPHA = 0
    COMPRESS = 1
    INVERT = 2
    TEXT = 3
    FLOAT = 4


DEFAULT_SHIFTS = (16, 8, 0, 24)


@dataclass
class _Settings:
    options: int = 0
    rshift: int = DEFAULT_SHIFTS[0]
    gshift: int = DEFAULT_SHIFTS[1]
    bshift: int = DEFAULT_SHIFTS[2]
    ashift: int = DEFAULT_SHIFTS[3]


_settings = _Settings()


def set_image_option(opt: ImageOption, val: bool) -> bool:
    """Set an option and return its previous state."""
    mask = 1 << int(opt)
    previous = bool(_settings.options & mask)
    if val:
        _settings.options |= mask
    else:
        _settings.options &= ~mask
    return previous


def get_image_option(opt: ImageOption) -> bool:
    """Return whether an option is set."""
    return bool(_settings.options & (1 << int(opt)))


def set_pixel_format(rshift: int, gshift: int, bshift: int, ashift: int) -> None:
    """Set the bit shifts of the channels in a packed pixel."""
    _settings.rshift = rshift
    _settings.gshift = gshift
    _settings.bshift = bshift
    _settings.ashift = ashift


def get_pixel_format() -> tuple[int, int, int, int]:
    """Return the (red, green, blue, alpha) bit shifts of a packed pixel."""
    return (_settings.rshift, _settings.gshift, _settings.bshift, _settings.ashift)


def pack_color32(a: int, r: int, g: int, b: int) -> int:
    """Pack four 8-bit channels into a 32-bit pixel."""
    return (
        ((a & 0xFF) << _settings.ashift)
        | ((r & 0xFF) << _settings.rshift)
        | ((g & 0xFF) << _settings.gshift)
        | ((b & 0xFF) << _settings.bshift)
    ) & 0xFFFFFFFF


def pack_color24(r: int, g: int, b: int) -> int:
    """Pack an opaque pixel."""
    return pack_color32(0xFF, r, g, b)


def unpack_red(pixel: int) -> int:
    return (pixel >> _settings.rshift) & 0xFF


def unpack_green(pixel: int) -> int:
    return (pixel >> _settings.gshift) & 0xFF


def unpack_blue(pixel: int) -> int:
    return (pixel >> _settings.bshift) & 0xFF


def unpack_alpha(pixel: int) -> int:
    return (pixel >> _settings.ashift) & 0xFF


def conv_32bpp_to_float(pixels: Iterable[int]) -> list[float]:
    """Expand packed pixels into RGBA floats in [0, 1], four per pixel."""
    result: list[float] = []
    for p in pixels:
        result.extend(
            (
                unpack_red(p) / 255.0,
                unpack_green(p) / 255.0,
                unpack_blue(p) / 255.0,
                unpack_alpha(p) / 255.0,
            )
        )
    return result


def _clamp_channel(value: float) -> int:
    return max(0, min(255, int(value * 255.0)))


def conv_float_to_32bpp(values: Iterable[float]) -> list[int]:
    """Pack RGBA floats, four per pixel, into 32-bit pixels, clamping each channel."""
    values = list(values)
    if len(values) % 4:
        raise ValueError("float pixel data must hold four values per pixel")
    quads = zip(*[iter(values)] * 4)
    return [
        pack_color32(_clamp_channel(a), _clamp_channel(r), _clamp_channel(g), _clamp_channel(b))
        for r, g, b, a in quads
    ]


@dataclass
class Image:
    """An image held as packed 32-bit pixels, or as RGBA floats when ``is_float``."""

    width: int
    height: int
    pixels: list
    is_float: bool = False

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("image dimensions must not be negative")
        self.pixels = list(self.pixels)
        per_pixel = 4 if self.is_float else 1
        expected = self.width * self.height * per_pixel
        if len(self.pixels) != expected:
            raise ValueError(
                f"expected {expected} pixel values for {self.width}x{self.height}, "
                f"got {len(self.pixels)}"
            )

    @classmethod
    def from_packed(cls, width: int, height: int, pixels: Iterable[int]) -> "Image":
        """Build a loaded image, converting to floats when the FLOAT option is set."""
        pixels = list(pixels)
        if get_image_option(ImageOption.FLOAT):
            return cls(width, height, conv_32bpp_to_float(pixels), is_float=True)
        return cls(width, height, pixels)

    def packed(self) -> list[int]:
        """The pixels as packed 32-bit values."""
        if self.is_float:
            return conv_float_to_32bpp(self.pixels)
        return list(self.pixels)

    def as_float(self) -> list[float]:
        """The pixels as RGBA floats, four per pixel."""
        if self.is_float:
            return list(self.pixels)
        return conv_32bpp_to_float(self.pixels)

    def rows(self, invert: bool = False) -> Iterator[list[int]]:
        """Yield rows of packed pixels, bottom-up when ``invert`` is true."""
        packed = self.packed()
        order = range(self.height - 1, -1, -1) if invert else range(self.height)
        for y in order:
            yield packed[y * self.width : (y + 1) * self.width]