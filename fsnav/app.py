"""The navigator: command line, data files, and camera and input state."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .fstree import (
    Dir,
    FSNode,
    LayoutParameter,
    Vector3,
    build_tree,
    get_selection,
    set_layout_param,
)
from .stereo import StereoCamera

PREFIX = "/usr/local"
DATA_DIRS = (
    f"{PREFIX}/share/fsnav",
    "/usr/local/share/fsnav",
    "/usr/share/fsnav",
    "data",
)

TRANS_TIME = 0.8
DOUBLE_CLICK_INTERVAL = 400

LEFT_BUTTON = 0
MIDDLE_BUTTON = 1
RIGHT_BUTTON = 2
WHEEL_UP = 3
WHEEL_DOWN = 4

ESCAPE = "\x1b"


@dataclass
class Options:
    """Command line options."""

    stereo: bool = False
    root_dirname: str = "."


def parse_args(argv: Sequence[str]) -> Options:
    """Parse the arguments (without the program name); raises ValueError on bad usage."""
    stereo = False
    root: str | None = None
    for arg in argv:
        if len(arg) == 2 and arg.startswith("-"):
            if arg[1] == "s":
                stereo = not stereo
            else:
                raise ValueError(f"invalid option: {arg}")
        else:
            if root is not None:
                raise ValueError(f"unexpected argument: {arg}")
            root = arg
    return Options(stereo=stereo, root_dirname=root if root is not None else ".")


def find_data_file(fname: str, dirs: Iterable[str] | None = None) -> str:
    """The path of ``fname`` in the first data directory holding it, else ``fname``."""
    for directory in DATA_DIRS if dirs is None else dirs:
        path = os.path.join(directory, fname)
        try:
            with open(path, "rb"):
                return path
        except OSError:
            continue
    return fname


def _lerp(a: Vector3, b: Vector3, t: float) -> Vector3:
    return a + (b - a) * t


@dataclass
class Navigator:
    """Camera and selection state driven by keyboard and mouse input.

    Input handlers return whether the view needs to be redrawn.
    """

    root: Dir
    stereo: bool = False
    cam_theta: float = 0.0
    cam_phi: float = 25.0
    cam_dist: float = 5.0
    cam_y: float = 0.0
    cam_from: Vector3 = Vector3()
    cam_targ: Vector3 = Vector3()
    cam_motion_start: int = 0
    hover_file_info: bool = False
    clicked_node: FSNode | None = None
    camera: StereoCamera = field(default_factory=StereoCamera)
    _pressed: set = field(default_factory=set, repr=False)
    _prev_x: int = field(default=-1, repr=False)
    _prev_y: int = field(default=0, repr=False)
    _prev_left_click: int = field(default=0, repr=False)
    _prev_left_x: int = field(default=0, repr=False)
    _prev_left_y: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self.camera.set_focus_dist(4.0)

    def camera_position(self, msec: int) -> Vector3:
        """The camera target at time ``msec``, moving from the old to the new target."""
        t = (msec - self.cam_motion_start) / 1000.0 / TRANS_TIME
        if t > 1.0 or t < 0.0:
            t = 1.0
        return _lerp(self.cam_from, self.cam_targ, t)

    def key_down(self, key: str) -> bool:
        """Escape quits; space shows the stats of the file under the pointer."""
        if key == ESCAPE:
            raise SystemExit(0)
        if key == " ":
            self.hover_file_info = True
            self.clicked_node = None
            return True
        return False

    def key_up(self, key: str) -> bool:
        if key == " ":
            self.hover_file_info = False
            return True
        return False

    def mouse(self, button: int, down: bool, x: int, y: int, msec: int) -> bool:
        """Handle a button press or release at window position (x, y) at time ``msec``."""
        redraw = False
        if down:
            self._pressed.add(button)
            if button == LEFT_BUTTON:
                dx = abs(x - self._prev_left_x)
                dy = abs(y - self._prev_left_y)
                elapsed = msec - self._prev_left_click
                if 0 <= elapsed < DOUBLE_CLICK_INTERVAL and dx < 3 and dy < 3:
                    redraw = self.double_click(msec)
                    self._prev_left_click = 0
                else:
                    self._prev_left_click = msec
                    self._prev_left_x = x
                    self._prev_left_y = y

            if button == WHEEL_UP:
                self.cam_dist = max(0.0, self.cam_dist - 0.5)
                redraw = True
            elif button == WHEEL_DOWN:
                self.cam_dist += 0.5
                redraw = True
            else:
                self._prev_x = x
                self._prev_y = y
        else:
            self._pressed.discard(button)
            if button == LEFT_BUTTON and x == self._prev_left_x and y == self._prev_left_y:
                self.clicked_node = get_selection()
                redraw = True
            self._prev_x = -1
        return redraw

    def motion(self, x: int, y: int) -> bool:
        """Drag: left rotates, middle raises, right zooms."""
        redraw = False
        if LEFT_BUTTON in self._pressed:
            self.cam_theta += (x - self._prev_x) * 0.5
            self.cam_phi += (y - self._prev_y) * 0.5
            self.cam_phi = min(90.0, max(5.0, self.cam_phi))
            redraw = True
        if MIDDLE_BUTTON in self._pressed:
            self.cam_y += (self._prev_y - y) * 0.1
            redraw = True
        if RIGHT_BUTTON in self._pressed:
            self.cam_dist += (y - self._prev_y) * 0.1
            redraw = True
        self._prev_x = x
        self._prev_y = y
        return redraw

    def double_click(self, msec: int) -> bool:
        """Start moving the camera to the selected node, if there is one."""
        selected = get_selection()
        if selected is None:
            return False
        self.cam_from = self.cam_targ
        self.cam_targ = selected.vis_pos
        self.cam_motion_start = msec
        return True


def _configure_layout() -> None:
    set_layout_param(LayoutParameter.FILE_SIZE, 0.5)
    set_layout_param(LayoutParameter.FILE_SPACING, 0.1)
    set_layout_param(LayoutParameter.FILE_HEIGHT, 0.1)
    set_layout_param(LayoutParameter.DIR_SIZE, 0.5 + 0.2)
    set_layout_param(LayoutParameter.DIR_SPACING, 0.5)
    set_layout_param(LayoutParameter.DIR_HEIGHT, 0.1)
    set_layout_param(LayoutParameter.DIR_DIST, 5.0)


def _count(tree: Dir) -> tuple[int, int]:
    dirs, files = len(tree.subdirs), len(tree.files)
    for sub in tree.subdirs:
        d, f = _count(sub)
        dirs += d
        files += f
    return dirs, files


def main(argv: Sequence[str] | None = None) -> int:
    """Scan and lay out the tree of the given directory and report its size."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options = parse_args(args)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    _configure_layout()
    root = Dir()
    try:
        build_tree(root, options.root_dirname)
    except OSError as exc:
        print(
            f"failed to open dir: {options.root_dirname}: {exc.strerror or exc}",
            file=sys.stderr,
        )
        return 1
    root.layout()

    dirs, files = _count(root)
    print(f"{root.name}: {dirs} directories, {files} files")
    return 0


if __name__ == "__main__":
    sys.exit(main())