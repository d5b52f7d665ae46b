"""Off-axis stereo projection parameters for left, right and centre views."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass


class Eye(enum.IntEnum):
    """The view being rendered."""

    CENTER = 0
    LEFT = 1
    RIGHT = 2


_VIEW_SIGN = {Eye.CENTER: 0.0, Eye.LEFT: 0.5, Eye.RIGHT: -0.5}
_FRUSTUM_SIGN = {Eye.CENTER: 0.0, Eye.LEFT: 1.0, Eye.RIGHT: -1.0}


@dataclass(frozen=True)
class Frustum:
    """The clip planes of a perspective frustum."""

    left: float
    right: float
    bottom: float
    top: float
    near: float
    far: float


@dataclass
class StereoCamera:
    """Projection and eye-separation settings for stereo rendering."""

    vfov: float = 45.0
    aspect: float = 1.0
    near: float = 0.5
    far: float = 500.0
    eye_sep: float = 1.0 / 30.0
    focus_dist: float = 1.0

    def set_projection(self, vfov: float, aspect: float, near: float, far: float) -> None:
        """Set the vertical field of view in degrees, aspect ratio and clip distances."""
        self.vfov = vfov
        self.aspect = aspect
        self.near = near
        self.far = far

    def set_focus_dist(self, dist: float) -> None:
        """Set the focus distance; the eye separation follows it."""
        self.focus_dist = dist
        self.eye_sep = dist / 30.0

    def view_offset(self, eye: Eye) -> float:
        """The horizontal translation applied to the view for ``eye``."""
        return self.eye_sep * _VIEW_SIGN[Eye(eye)]

    def frustum(self, eye: Eye) -> Frustum:
        """The asymmetric frustum for ``eye``."""
        top = self.near * math.tan(math.radians(self.vfov) * 0.5)
        right = top * self.aspect
        shift = _FRUSTUM_SIGN[Eye(eye)] * (self.eye_sep * 0.5 * self.near / self.focus_dist)
        return Frustum(-right + shift, right + shift, -top, top, self.near, self.far)