import os

import pytest

from fsnav.fstree import (
    Dir,
    File,
    LayoutParameter,
    Ray,
    TimeKind,
    Vector3,
    build_tree,
    get_layout_param,
    get_selection,
    set_layout_param,
)

DOWN = Vector3(0, -1, 0)


@pytest.fixture
def params():
    values = {
        LayoutParameter.FILE_SIZE: 0.5,
        LayoutParameter.FILE_SPACING: 0.1,
        LayoutParameter.FILE_HEIGHT: 0.1,
        LayoutParameter.DIR_SIZE: 0.7,
        LayoutParameter.DIR_SPACING: 0.5,
        LayoutParameter.DIR_HEIGHT: 0.1,
        LayoutParameter.DIR_DIST: 5.0,
    }
    for key, value in values.items():
        set_layout_param(key, value)
    yield values
    for key in values:
        set_layout_param(key, 0.0)


@pytest.fixture(autouse=True)
def clear_selection():
    yield
    Dir().pick(Ray(Vector3(0, 10, 0), DOWN))


def test_vector_arithmetic():
    assert Vector3(1, 2, 3) + Vector3(4, 5, 6) == Vector3(5, 7, 9)
    assert Vector3(1, 2, 3).dot(Vector3(4, 5, 6)) == 32


def test_ray_at():
    assert Ray(Vector3(1, 0, 0), Vector3(0, 2, 0)).at(0.5) == Vector3(1, 1, 0)


def test_layout_param_round_trip():
    set_layout_param(LayoutParameter.DIR_DIST, 2.5)
    try:
        assert get_layout_param(LayoutParameter.DIR_DIST) == 2.5
    finally:
        set_layout_param(LayoutParameter.DIR_DIST, 0.0)


def test_add_subdir_and_file_set_parent_and_link():
    root = Dir(name="root")
    sub = Dir(name="sub")
    f = File(name="f")
    root.add_subdir(sub)
    root.add_file(f)
    assert sub.parent is root
    assert f.parent is root
    assert len(root.links) == 1
    assert root.links[0].source is root and root.links[0].target is sub


def test_intersect_from_above_hits_top_face():
    node = File(vis_pos=Vector3(), vis_size=Vector3(1, 1, 1))
    ray = Ray(Vector3(0, 5, 0), DOWN)
    t = node.intersect(ray)
    assert t is not None
    assert ray.at(t).y == pytest.approx(node.vis_pos.y + node.vis_size.y)


def test_intersect_from_side_hits_side_face():
    node = File(vis_pos=Vector3(), vis_size=Vector3(1, 1, 1))
    ray = Ray(Vector3(5, 0, 0), Vector3(-1, 0, 0))
    t = node.intersect(ray)
    assert t is not None
    assert ray.at(t).x == pytest.approx(node.vis_pos.x + node.vis_size.x)


def test_intersect_misses():
    node = File(vis_pos=Vector3(), vis_size=Vector3(1, 1, 1))
    assert node.intersect(Ray(Vector3(5, 5, 0), DOWN)) is None
    assert node.intersect(Ray(Vector3(0, 5, 0), Vector3(0, 1, 0))) is None


def test_text_positions():
    f = File(vis_pos=Vector3(1, 2, 3), vis_size=Vector3(0.5, 0.25, 0.5))
    assert f.text_pos() == f.vis_pos + Vector3(0, f.vis_size.y, 0)
    d = Dir(vis_pos=Vector3(1, 2, 3), vis_size=Vector3(2, 2, 2))
    shift = d.text_pos(0.5).z - d.text_pos(0.0).z
    assert shift == pytest.approx(0.5 * Dir.text_size)
    assert d.text_pos(0.5).x == d.vis_pos.x


def test_layout_root_and_empty_dir(params):
    root = Dir(name="r")
    root.layout()
    height = params[LayoutParameter.DIR_HEIGHT]
    assert root.vis_pos.x == 0 and root.vis_pos.z == 0
    assert root.vis_pos.y == pytest.approx(height / 2)
    size = params[LayoutParameter.DIR_SIZE]
    assert root.vis_size == Vector3(size, height, size)


def test_layout_subdirs_behind_parent(params):
    root = Dir(name="r")
    a, b = Dir(name="a"), Dir(name="b")
    root.add_subdir(a)
    root.add_subdir(b)
    root.layout()
    for child in (a, b):
        assert child.vis_pos.y == root.vis_pos.y
        assert child.vis_pos.z < root.vis_pos.z - params[LayoutParameter.DIR_DIST]
    assert a.vis_pos.x < b.vis_pos.x


def test_layout_files_in_rows(params):
    root = Dir(name="r")
    files = [File(name=f"f{i}") for i in range(4)]
    for f in files:
        root.add_file(f)
    root.layout()
    fsize = params[LayoutParameter.FILE_SIZE]
    fheight = params[LayoutParameter.FILE_HEIGHT]
    for f in files:
        assert f.vis_size == Vector3(fsize, fheight, fsize)
        assert f.vis_pos.y > root.vis_pos.y
    assert files[0].vis_pos.z == files[1].vis_pos.z
    assert files[1].vis_pos.x > files[0].vis_pos.x
    assert files[2].vis_pos.z > files[0].vis_pos.z
    assert files[2].vis_pos.x == pytest.approx(files[0].vis_pos.x)
    assert files[3].vis_pos.z == files[2].vis_pos.z


def test_find_intersection_prefers_file_over_dir(params):
    root = Dir(name="r")
    f = File(name="f")
    root.add_file(f)
    root.layout()
    ray = Ray(Vector3(f.vis_pos.x, 10, f.vis_pos.z), DOWN)
    node, t = root.find_intersection(ray)
    assert node is f
    assert ray.at(t).y == pytest.approx(f.vis_pos.y + f.vis_size.y)


def test_find_intersection_miss_returns_none(params):
    root = Dir(name="r")
    root.layout()
    assert root.find_intersection(Ray(Vector3(100, 10, 100), DOWN)) is None


def test_pick_tracks_selection(params):
    root = Dir(name="r")
    f = File(name="f")
    root.add_file(f)
    root.layout()
    ray = Ray(Vector3(f.vis_pos.x, 10, f.vis_pos.z), DOWN)

    assert root.pick(ray) is True
    assert get_selection() is f
    assert f.selected
    assert root.pick(ray) is False

    assert root.pick(Ray(Vector3(100, 10, 100), DOWN)) is True
    assert get_selection() is None
    assert not f.selected


def test_build_tree(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"hello")
    (tmp_path / "b.bin").write_bytes(bytes(10))
    sub_path = tmp_path / "sub"
    sub_path.mkdir()
    (sub_path / "c.txt").write_bytes(b"x")

    root = build_tree(Dir(), str(tmp_path))
    assert root.name == str(tmp_path)
    assert {f.name: f.size for f in root.files} == {"a.txt": 5, "b.bin": 10}
    assert [d.name for d in root.subdirs] == ["sub"]
    sub = root.subdirs[0]
    assert sub.parent is root
    assert root.links[0].target is sub
    assert [f.name for f in sub.files] == ["c.txt"]
    assert sub.files[0].parent is sub


def test_build_tree_records_times(tmp_path):
    path = tmp_path / "t.txt"
    path.write_bytes(b"")
    os.utime(path, (1_000_000, 2_000_000))
    root = build_tree(Dir(), tmp_path)
    (f,) = root.files
    assert f.times[TimeKind.ATIME] == 1_000_000
    assert f.times[TimeKind.MTIME] == 2_000_000


def test_build_tree_missing_directory(tmp_path):
    tree = Dir()
    with pytest.raises(OSError):
        build_tree(tree, tmp_path / "missing")
    assert tree.name == str(tmp_path / "missing")