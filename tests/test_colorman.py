import pytest

from fsnav.colorman import get_color
from fsnav.fstree import Dir, File, Vector3


@pytest.mark.parametrize(
    "node, expected",
    [
        (Dir(), Vector3(0.263, 0.396, 0.647)),
        (Dir(selected=True), Vector3(0.3, 0.5, 1.0)),
        (File(), Vector3(0.278, 0.023, 0.023)),
        (File(selected=True), Vector3(0.4, 0.2, 0.1)),
    ],
)
def test_colors(node, expected):
    assert get_color(node) == expected


def test_selection_changes_color():
    f = File()
    before = get_color(f)
    f.selected = True
    assert get_color(f) != before
    assert get_color(f) == Vector3(0.4, 0.2, 0.1)