"""Colours of the node boxes."""

from __future__ import annotations

from .fstree import Dir, FSNode, Vector3

_DIR_COLORS = (Vector3(0.263, 0.396, 0.647), Vector3(0.3, 0.5, 1.0))
_FILE_COLORS = (Vector3(0.278, 0.023, 0.023), Vector3(0.4, 0.2, 0.1))


def get_color(node: FSNode) -> Vector3:
    """The RGB colour of a node, brighter when it is selected."""
    colors = _DIR_COLORS if isinstance(node, Dir) else _FILE_COLORS
    return colors[1 if node.selected else 0]