"""Ward's RGBE (Radiance) high dynamic range images: header, pixel codec and loading."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import BinaryIO, Sequence

from .pixels import Image, ImageError, ImageOption, get_image_option, pack_color24

FORMAT_LINE = b"FORMAT=32-bit_rle_rgbe\n"
DEFAULT_PROGRAM_TYPE = "RGBE"

_LINE_LIMIT = 127
_PROGRAM_TYPE_LIMIT = 15
_MIN_RUN_LENGTH = 4
_MAX_RLE_WIDTH = 0x7FFF
_MIN_RLE_WIDTH = 8

_FLOAT = rb"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
_GAMMA = re.compile(rb"GAMMA=" + _FLOAT)
_EXPOSURE = re.compile(rb"EXPOSURE=" + _FLOAT)
_SIZE = re.compile(rb"-Y\s*([+-]?\d+)\s*\+X\s*([+-]?\d+)")


@dataclass
class RgbeHeader:
    """Optional header fields; a field left as None is absent from the file."""

    programtype: str | None = None
    gamma: float | None = None
    exposure: float | None = None


def _read_error() -> ImageError:
    return ImageError("RGBE read error: unexpected end of file")


def _format_error(msg: str) -> ImageError:
    return ImageError(f"RGBE bad file format: {msg}")


def _read_line(fp: BinaryIO) -> bytes:
    line = fp.readline(_LINE_LIMIT)
    if not line:
        raise _read_error()
    return line


def _read_exact(fp: BinaryIO, size: int) -> bytes:
    data = fp.read(size)
    if len(data) < size:
        raise _read_error()
    return data


def read_header(fp: BinaryIO) -> tuple[int, int, RgbeHeader]:
    """Read an RGBE header from the current position; return (width, height, header)."""
    header = RgbeHeader()
    line = _read_line(fp)
    if line.startswith(b"#?"):
        name = bytearray()
        for c in line[2 : 2 + _PROGRAM_TYPE_LIMIT]:
            if c == 0 or chr(c).isspace():
                break
            name.append(c)
        header.programtype = name.decode("latin-1")
        line = _read_line(fp)

    while True:
        if line[:1] in (b"\0", b"\n"):
            raise _format_error("no FORMAT specifier found")
        if line == FORMAT_LINE:
            break
        match = _GAMMA.match(line)
        if match:
            header.gamma = float(match.group(1))
        else:
            match = _EXPOSURE.match(line)
            if match:
                header.exposure = float(match.group(1))
        line = _read_line(fp)

    if _read_line(fp) != b"\n":
        raise _format_error("missing blank line after FORMAT specifier")

    match = _SIZE.match(_read_line(fp))
    if not match:
        raise _format_error("missing image size specifier")
    height, width = int(match.group(1)), int(match.group(2))
    if width < 0 or height < 0:
        raise _format_error("negative image size")
    return width, height, header


def write_header(fp: BinaryIO, width: int, height: int, header: RgbeHeader | None = None) -> None:
    """Write a minimal RGBE header with the optional fields of ``header``."""
    header = header or RgbeHeader()
    programtype = header.programtype if header.programtype is not None else DEFAULT_PROGRAM_TYPE
    lines = [f"#?{programtype}\n"]
    if header.gamma is not None:
        lines.append(f"GAMMA={header.gamma:g}\n")
    if header.exposure is not None:
        lines.append(f"EXPOSURE={header.exposure:g}\n")
    lines.append(FORMAT_LINE.decode("ascii") + "\n")
    lines.append(f"-Y {height} +X {width}\n")
    fp.write("".join(lines).encode("latin-1"))


def float_to_rgbe(red: float, green: float, blue: float) -> bytes:
    """Encode a floating point colour as four RGBE bytes."""
    v = max(red, green, blue)
    if v < 1e-32:
        return bytes(4)
    mantissa, exponent = math.frexp(v)
    scale = mantissa * 256.0 / v

    def channel(c: float) -> int:
        return min(255, int(c * scale)) & 0xFF

    return bytes((channel(red), channel(green), channel(blue), (exponent + 128) & 0xFF))


def rgbe_to_float(rgbe: Sequence[int]) -> tuple[float, float, float]:
    """Decode four RGBE bytes into a floating point colour."""
    r, g, b, e = rgbe[0], rgbe[1], rgbe[2], rgbe[3]
    if not e:
        return (0.0, 0.0, 0.0)
    f = math.ldexp(1.0, e - (128 + 8))
    return (r * f, g * f, b * f)


def _read_flat(fp: BinaryIO, count: int) -> list[float]:
    data = _read_exact(fp, 4 * count)
    out: list[float] = []
    for i in range(0, len(data), 4):
        out.extend(rgbe_to_float(data[i : i + 4]))
    return out


def _read_channel(fp: BinaryIO, width: int) -> bytearray:
    chan = bytearray()
    while len(chan) < width:
        code, value = _read_exact(fp, 2)
        room = width - len(chan)
        if code > 128:
            count = code - 128
            if count > room:
                raise _format_error("bad scanline data")
            chan += bytes((value,)) * count
        else:
            count = code
            if count == 0 or count > room:
                raise _format_error("bad scanline data")
            chan.append(value)
            if count > 1:
                chan += _read_exact(fp, count - 1)
    return chan


def read_pixels_rle(fp: BinaryIO, width: int, height: int) -> list[float]:
    """Read ``width * height`` pixels as RGB floats, run-length encoded or flat."""
    if width < _MIN_RLE_WIDTH or width > _MAX_RLE_WIDTH:
        return _read_flat(fp, width * height)

    out: list[float] = []
    for remaining in range(height, 0, -1):
        head = _read_exact(fp, 4)
        if head[0] != 2 or head[1] != 2 or head[2] & 0x80:
            # not run-length encoded: the rest of the image is flat
            out.extend(rgbe_to_float(head))
            out.extend(_read_flat(fp, width * remaining - 1))
            return out
        if (head[2] << 8 | head[3]) != width:
            raise _format_error("wrong scanline width")
        channels = [_read_channel(fp, width) for _ in range(4)]
        for pixel in zip(*channels):
            out.extend(rgbe_to_float(pixel))
    return out


def _write_bytes_rle(data: bytes) -> bytes:
    out = bytearray()
    n = len(data)
    cur = 0
    while cur < n:
        beg_run = cur
        run_count = old_run_count = 0
        while run_count < _MIN_RUN_LENGTH and beg_run < n:
            beg_run += run_count
            old_run_count = run_count
            run_count = 1
            while (
                beg_run + run_count < n
                and run_count < 127
                and data[beg_run] == data[beg_run + run_count]
            ):
                run_count += 1
        if old_run_count > 1 and old_run_count == beg_run - cur:
            out += bytes((128 + old_run_count, data[cur]))
            cur = beg_run
        while cur < beg_run:
            nonrun = min(beg_run - cur, 128)
            out.append(nonrun)
            out += data[cur : cur + nonrun]
            cur += nonrun
        if run_count >= _MIN_RUN_LENGTH:
            out += bytes((128 + run_count, data[beg_run]))
            cur += run_count
    return bytes(out)


def write_pixels_rle(fp: BinaryIO, data: Sequence[float], width: int, height: int) -> None:
    """Write RGB floats, three per pixel, run-length encoded where the width allows it."""
    count = width * height
    if len(data) < 3 * count:
        raise ValueError(f"expected {3 * count} float values, got {len(data)}")
    encoded = [float_to_rgbe(*data[3 * i : 3 * i + 3]) for i in range(count)]

    if width < _MIN_RLE_WIDTH or width > _MAX_RLE_WIDTH:
        fp.write(b"".join(encoded))
        return

    scan_head = bytes((2, 2, width >> 8, width & 0xFF))
    for y in range(height):
        row = encoded[y * width : (y + 1) * width]
        out = bytearray(scan_head)
        for channel in range(4):
            out += _write_bytes_rle(bytes(px[channel] for px in row))
        fp.write(bytes(out))


def check_rgbe(fp: BinaryIO) -> bool:
    """Return whether the stream starts with a readable RGBE header."""
    fp.seek(0)
    try:
        read_header(fp)
    except ImageError:
        return False
    return True


def load_rgbe(fp: BinaryIO) -> Image:
    """Load an RGBE image, as floats with the FLOAT option, as clamped 32-bit pixels otherwise."""
    keep_float = get_image_option(ImageOption.FLOAT)
    fp.seek(0)
    width, height, header = read_header(fp)
    if header.exposure is None:
        inv_exp = 1.0
    elif header.exposure == 0:
        raise _format_error("exposure must not be zero")
    else:
        inv_exp = 1.0 / header.exposure

    fpix = read_pixels_rle(fp, width, height)
    triples = zip(*[iter(fpix)] * 3)

    if keep_float:
        values: list[float] = []
        for r, g, b in triples:
            values.extend((r * inv_exp, g * inv_exp, b * inv_exp, 1.0))
        return Image(width, height, values, is_float=True)

    def to_byte(c: float) -> int:
        c *= inv_exp * 255.0
        return 255 if c > 255.0 else int(c)

    pixels = [pack_color24(to_byte(r), to_byte(g), to_byte(b)) for r, g, b in triples]
    return Image(width, height, pixels)


def save_rgbe(fp: BinaryIO, image: Image) -> None:
    """Saving RGBE files is not supported; always raises ImageError."""
    raise ImageError("saving rgbe files is not supported")