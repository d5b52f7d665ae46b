"""Text of the file information panel: permissions, sizes and the stats lines."""

from __future__ import annotations

import time

from .fstree import File, TimeKind

_PERM_CHARS = "rwx"
_KB = 1024
_MB = 1024 * 1024
_GB = 1024 * 1024 * 1024


def mode_str(mode: int) -> str:
    """The nine-character rwx permission string of ``mode``."""
    return "".join(
        _PERM_CHARS[bit % 3] if mode & (1 << (8 - bit)) else "-" for bit in range(9)
    )


def format_size(size: int) -> str:
    """A file size in bytes, kb, mb or gb."""
    if size < _KB:
        return f"{int(size)} bytes"
    if size < _MB:
        return f"{size / _KB:.1f} kb"
    if size < _GB:
        return f"{size / _MB:.1f} mb"
    return f"{size / _GB:.1f} gb"


def _timestamp(seconds: int) -> str:
    return time.asctime(time.localtime(seconds))


def file_stats_lines(file: File) -> list[str]:
    """The lines shown in a file's information panel, its name first."""
    return [
        file.name or "",
        f"    size: {format_size(file.size)}",
        f"    perm: {mode_str(file.mode)}",
        f"    user: {file.user()} ({file.uid})",
        f"   group: {file.group()} ({file.gid})",
        f"accessed: {_timestamp(file.times[TimeKind.ATIME])}",
        f"modified: {_timestamp(file.times[TimeKind.MTIME])}",
        f" created: {_timestamp(file.times[TimeKind.CTIME])}",
    ]