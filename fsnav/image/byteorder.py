"""Fixed-width integer and float I/O in explicit byte order on binary streams."""

from __future__ import annotations

import struct
from typing import BinaryIO


def _read(fp: BinaryIO, fmt: str) -> int | float:
    size = struct.calcsize(fmt)
    data = fp.read(size)
    if len(data) < size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return struct.unpack(fmt, data)[0]


def _write_int(fp: BinaryIO, fmt: str, bits: int, value: int) -> None:
    fp.write(struct.pack(fmt, int(value) & ((1 << bits) - 1)))


def read_int8(fp: BinaryIO) -> int:
    """Read a signed 8-bit integer."""
    return _read(fp, "<b")


def read_int16_le(fp: BinaryIO) -> int:
    """Read a signed little-endian 16-bit integer."""
    return _read(fp, "<h")


def read_int16_be(fp: BinaryIO) -> int:
    """Read a signed big-endian 16-bit integer."""
    return _read(fp, ">h")


def read_int32_le(fp: BinaryIO) -> int:
    """Read a signed little-endian 32-bit integer."""
    return _read(fp, "<i")


def read_int32_be(fp: BinaryIO) -> int:
    """Read a signed big-endian 32-bit integer."""
    return _read(fp, ">i")


def read_float_le(fp: BinaryIO) -> float:
    """Read a little-endian IEEE 754 single-precision float."""
    return _read(fp, "<f")


def read_float_be(fp: BinaryIO) -> float:
    """Read a big-endian IEEE 754 single-precision float."""
    return _read(fp, ">f")


def write_int8(fp: BinaryIO, value: int) -> None:
    """Write the low 8 bits of ``value``."""
    _write_int(fp, "<B", 8, value)


def write_int16_le(fp: BinaryIO, value: int) -> None:
    """Write the low 16 bits of ``value`` in little-endian order."""
    _write_int(fp, "<H", 16, value)


def write_int16_be(fp: BinaryIO, value: int) -> None:
    """Write the low 16 bits of ``value`` in big-endian order."""
    _write_int(fp, ">H", 16, value)


def write_int32_le(fp: BinaryIO, value: int) -> None:
    """Write the low 32 bits of ``value`` in little-endian order."""
    _write_int(fp, "<I", 32, value)


def write_int32_be(fp: BinaryIO, value: int) -> None:
    """Write the low 32 bits of ``value`` in big-endian order."""
    _write_int(fp, ">I", 32, value)


def write_float_le(fp: BinaryIO, value: float) -> None:
    """Write a little-endian IEEE 754 single-precision float."""
    fp.write(struct.pack("<f", value))


def write_float_be(fp: BinaryIO, value: float) -> None:
    """Write a big-endian IEEE 754 single-precision float."""
    fp.write(struct.pack(">f", value))