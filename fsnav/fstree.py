"""The filesystem tree: scanning, layout of its visual boxes and ray picking."""

from __future__ import annotations

import enum
import logging
import math
import os
import stat
from dataclasses import dataclass, field
from typing import ClassVar

try:
    import grp
    import pwd
except ImportError:  # platforms without a user database
    grp = None
    pwd = None

log = logging.getLogger(__name__)

ERROR_MARGIN = 1e-6


@dataclass(frozen=True)
class Vector3:
    """An immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, s: float) -> Vector3:
        return Vector3(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> Vector3:
        return Vector3(self.x / s, self.y / s, self.z / s)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> float:
        """The dot product with ``other``."""
        return self.x * other.x + self.y * other.y + self.z * other.z


@dataclass(frozen=True)
class Ray:
    """A ray with an origin and a (not necessarily unit) direction."""

    origin: Vector3 = Vector3()
    direction: Vector3 = Vector3()

    def at(self, t: float) -> Vector3:
        """The point at parameter ``t`` along the ray."""
        return self.origin + self.direction * t


class LayoutParameter(enum.IntEnum):
    FILE_SIZE = 0
    FILE_SPACING = 1
    FILE_HEIGHT = 2
    DIR_SIZE = 3
    DIR_SPACING = 4
    DIR_HEIGHT = 5
    DIR_DIST = 6


class TimeKind(enum.IntEnum):
    ATIME = 0
    MTIME = 1
    CTIME = 2


_params: dict[LayoutParameter, float] = dict.fromkeys(LayoutParameter, 0.0)


@dataclass
class _Selection:
    node: FSNode | None = None


_selection = _Selection()


def set_layout_param(which: LayoutParameter, val: float) -> None:
    """Set one of the layout parameters."""
    _params[LayoutParameter(which)] = float(val)


def get_layout_param(which: LayoutParameter) -> float:
    """Return one of the layout parameters."""
    return _params[LayoutParameter(which)]


def get_selection() -> FSNode | None:
    """The node most recently picked, if any."""
    return _selection.node


# (normal, take the plane point from the box maximum, axes bounded on that face)
_FACES = (
    (Vector3(0, 0, -1), False, ("x", "y")),
    (Vector3(1, 0, 0), True, ("z", "y")),
    (Vector3(0, 0, 1), True, ("x", "y")),
    (Vector3(-1, 0, 0), False, ("z", "y")),
    (Vector3(0, 1, 0), True, ("x", "z")),
    (Vector3(0, -1, 0), False, ("x", "z")),
)


@dataclass(eq=False)
class Link:
    """The connection drawn between a directory and one of its subdirectories."""

    source: Dir
    target: Dir
    selected: bool = False


@dataclass(eq=False)
class FSNode:
    """A file or directory with its visual position and size."""

    name: str | None = None
    size: int = 0
    vis_pos: Vector3 = Vector3()
    vis_size: Vector3 = Vector3()
    parent: Dir | None = field(default=None, repr=False)
    selected: bool = False

    text_size: ClassVar[float] = 1.0

    def intersect(self, ray: Ray) -> float | None:
        """Return the nearest ray parameter where the ray enters the node's box, or None."""
        lo = self.vis_pos - self.vis_size
        hi = self.vis_pos + self.vis_size

        nearest: float | None = None
        for normal, use_max, axes in _FACES:
            n_dot_dir = normal.dot(ray.direction)
            if abs(n_dot_dir) < ERROR_MARGIN:
                continue
            point = hi if use_max else lo
            t = -normal.dot(ray.origin - point) / n_dot_dir
            if t < ERROR_MARGIN:
                continue
            pos = ray.at(t)
            if any(
                getattr(pos, a) < getattr(lo, a) or getattr(pos, a) >= getattr(hi, a)
                for a in axes
            ):
                continue
            if nearest is None or t < nearest:
                nearest = t
        return nearest


@dataclass(eq=False)
class File(FSNode):
    """A non-directory entry with its ownership, permissions and times."""

    links: int = 0
    mode: int = 0
    uid: int = 0
    gid: int = 0
    times: dict = field(default_factory=lambda: dict.fromkeys(TimeKind, 0))

    text_size: ClassVar[float] = 1.0

    def user(self) -> str:
        """The name of the owning user, or "unknown"."""
        if pwd is None:
            return "unknown"
        try:
            return pwd.getpwuid(self.uid).pw_name
        except (KeyError, OverflowError):
            return "unknown"

    def group(self) -> str:
        """The name of the owning group, or "unknown"."""
        if grp is None:
            return "unknown"
        try:
            return grp.getgrgid(self.gid).gr_name
        except (KeyError, OverflowError):
            return "unknown"

    def text_pos(self) -> Vector3:
        """Where the file's label is placed."""
        return self.vis_pos + Vector3(0, self.vis_size.y, 0)


def _dir_size(num_files: int) -> tuple[float, float]:
    files_x = math.ceil(math.sqrt(num_files))
    files_y = math.ceil(num_files / files_x) if files_x else 0
    fsize = _params[LayoutParameter.FILE_SIZE]
    fspace = _params[LayoutParameter.FILE_SPACING]
    xsz = files_x * fsize + (files_x + 1) * fspace
    ysz = files_y * fsize + (files_y + 1) * fspace
    min_size = _params[LayoutParameter.DIR_SIZE]
    return max(xsz, min_size), max(ysz, min_size)


@dataclass(eq=False)
class Dir(FSNode):
    """A directory holding subdirectories, files and the links to its subdirectories."""

    subdirs: list = field(default_factory=list)
    files: list = field(default_factory=list)
    links: list = field(default_factory=list, repr=False)
    min_x: float = field(default=0.0, repr=False)
    max_x: float = field(default=0.0, repr=False)

    text_size: ClassVar[float] = 5.0

    def add_subdir(self, subdir: Dir) -> None:
        self.subdirs.append(subdir)
        subdir.parent = self
        self.links.append(Link(self, subdir))

    def add_file(self, file: File) -> None:
        self.files.append(file)
        file.parent = self

    def layout(self) -> None:
        """Compute the sizes and positions of the whole subtree."""
        self._calc_bounds()
        self._place(Vector3(0, _params[LayoutParameter.DIR_HEIGHT] / 2.0, 0))

    def _calc_bounds(self) -> None:
        width_x, depth = _dir_size(len(self.files))
        self.vis_size = Vector3(width_x, _params[LayoutParameter.DIR_HEIGHT], depth)

        child_width = 0.0
        for sub in self.subdirs:
            sub._calc_bounds()
            child_width += sub.max_x - sub.min_x

        width = max(width_x, child_width)
        spacing = _params[LayoutParameter.DIR_SPACING]
        self.min_x = -(width + spacing) / 2.0
        self.max_x = (width + spacing) / 2.0

    def _place(self, pos: Vector3) -> None:
        self.vis_pos = pos
        spacing = _params[LayoutParameter.DIR_SPACING]
        dist = _params[LayoutParameter.DIR_DIST]

        x = self.min_x - spacing / 2.0
        for sub in self.subdirs:
            width = sub.max_x - sub.min_x
            sub._place(
                Vector3(
                    pos.x + x + width / 2.0,
                    pos.y,
                    pos.z - (self.vis_size.z / 2.0 + dist),
                )
            )
            x += width + spacing

        side = math.ceil(math.sqrt(len(self.files)))
        fsize = _params[LayoutParameter.FILE_SIZE]
        fspace = _params[LayoutParameter.FILE_SPACING]
        fheight = _params[LayoutParameter.FILE_HEIGHT]
        row_width = side * fsize + (side - 1) * fspace

        offs = fsize / 2.0 + fspace
        start = (
            self.vis_pos
            - self.vis_size / 2.0
            + Vector3(offs, self.vis_size.y + fheight / 2.0, offs)
        )
        fx, fz = start.x, start.z
        for f in self.files:
            f.vis_pos = Vector3(fx, start.y, fz)
            f.vis_size = Vector3(fsize, fheight, fsize)
            fx += fsize + fspace
            if fx - start.x > row_width:
                fx = start.x
                fz += fsize + fspace

    def text_pos(self, line_advance: float) -> Vector3:
        """Where the directory's label is placed, given the font's line advance."""
        zoffs = self.vis_size.z / 2.0 + line_advance * self.text_size
        return self.vis_pos + Vector3(0, 0, zoffs)

    def find_intersection(self, ray: Ray) -> tuple[FSNode, float] | None:
        """Return the nearest node of the subtree hit by the ray with its parameter, or None."""
        best: tuple[FSNode, float] | None = None
        t = self.intersect(ray)
        if t is not None:
            best = (self, t)

        for sub in self.subdirs:
            hit = sub.find_intersection(ray)
            if hit is not None and (best is None or hit[1] < best[1]):
                best = hit

        for f in self.files:
            t = f.intersect(ray)
            if t is not None and (best is None or t < best[1]):
                best = (f, t)
        return best

    def pick(self, ray: Ray) -> bool:
        """Select the nearest node hit by the ray; return whether the selection changed."""
        hit = self.find_intersection(ray)
        node = hit[0] if hit is not None else None

        changed = _selection.node is not node
        if _selection.node is not None:
            _selection.node.selected = False
        if node is not None:
            node.selected = True
        _selection.node = node
        return changed


def _scan(tree: Dir, path: str | os.PathLike) -> None:
    with os.scandir(path) as entries:
        for entry in entries:
            try:
                st = entry.stat()
            except OSError as exc:
                log.warning("%s: stat failed: %s", entry.name, exc.strerror or exc)
                continue

            if stat.S_ISDIR(st.st_mode):
                sub = Dir(name=entry.name)
                tree.add_subdir(sub)
                try:
                    _scan(sub, entry.path)
                except OSError as exc:
                    log.warning("failed to open dir: %s: %s", entry.name, exc.strerror or exc)
            else:
                tree.add_file(
                    File(
                        name=entry.name,
                        size=st.st_size,
                        mode=st.st_mode,
                        uid=st.st_uid,
                        gid=st.st_gid,
                        times={
                            TimeKind.ATIME: int(st.st_atime),
                            TimeKind.MTIME: int(st.st_mtime),
                            TimeKind.CTIME: int(st.st_ctime),
                        },
                    )
                )


def build_tree(tree: Dir, dirname: str | os.PathLike) -> Dir:
    """Fill ``tree`` from the directory ``dirname``; raises OSError if it cannot be read."""
    tree.name = os.fsdecode(dirname)
    _scan(tree, dirname)
    return tree