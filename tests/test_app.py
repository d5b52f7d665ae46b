import os

import pytest

from fsnav.app import (
    DATA_DIRS,
    Navigator,
    Options,
    find_data_file,
    main,
    parse_args,
)
from fsnav.fstree import Dir, LayoutParameter, Ray, Vector3, get_selection, set_layout_param


def test_parse_args_defaults():
    assert parse_args([]) == Options(stereo=False, root_dirname=".")


def test_parse_args_stereo_toggles():
    assert parse_args(["-s"]).stereo is True
    assert parse_args(["-s", "-s"]).stereo is False


def test_parse_args_directory():
    opts = parse_args(["-s", "somewhere"])
    assert opts.root_dirname == "somewhere"
    assert opts.stereo is True


def test_parse_args_invalid_option():
    with pytest.raises(ValueError, match="invalid option: -x"):
        parse_args(["-x"])


def test_parse_args_second_directory_rejected():
    with pytest.raises(ValueError, match="unexpected argument: b"):
        parse_args(["a", "b"])


def test_find_data_file_first_match(tmp_path):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.mkdir()
    second.mkdir()
    (second / "font.ttf").write_bytes(b"x")
    (first / "font.ttf").write_bytes(b"y")
    found = find_data_file("font.ttf", [str(first), str(second)])
    assert found == str(first / "font.ttf")


def test_find_data_file_skips_missing(tmp_path):
    (tmp_path / "scope.png").write_bytes(b"x")
    found = find_data_file("scope.png", [str(tmp_path / "nope"), str(tmp_path)])
    assert found == str(tmp_path / "scope.png")


def test_find_data_file_falls_back_to_name(tmp_path):
    assert find_data_file("missing.pfb", [str(tmp_path)]) == "missing.pfb"


def test_default_dirs_search_local_data(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "data").mkdir()
    name = "fsnav-test-only-asset.bin"
    (tmp_path / "data" / name).write_bytes(b"x")
    assert find_data_file(name, DATA_DIRS) == os.path.join("data", name)


@pytest.fixture
def root():
    set_layout_param(LayoutParameter.FILE_SIZE, 0.5)
    set_layout_param(LayoutParameter.FILE_SPACING, 0.1)
    set_layout_param(LayoutParameter.FILE_HEIGHT, 0.1)
    set_layout_param(LayoutParameter.DIR_SIZE, 0.7)
    set_layout_param(LayoutParameter.DIR_SPACING, 0.5)
    set_layout_param(LayoutParameter.DIR_HEIGHT, 0.1)
    set_layout_param(LayoutParameter.DIR_DIST, 5.0)
    tree = Dir(name="root")
    tree.layout()
    yield tree
    tree.pick(Ray(Vector3(1000, 1000, 1000), Vector3(1, 0, 0)))


def _select(tree):
    assert tree.pick(Ray(Vector3(0, 10, 0), Vector3(0, -1, 0)))
    assert get_selection() is tree


def test_camera_starts_at_origin(root):
    nav = Navigator(root)
    assert nav.camera_position(5000) == Vector3()
    assert nav.camera.focus_dist == 4.0


def test_double_click_moves_camera(root):
    _select(root)
    nav = Navigator(root)
    assert nav.double_click(1000) is True
    assert nav.camera_position(1000) == Vector3()
    end = nav.camera_position(1000 + 800)
    assert end == root.vis_pos
    mid = nav.camera_position(1400)
    assert mid.y == pytest.approx(root.vis_pos.y * 0.5)


def test_double_click_without_selection(root):
    nav = Navigator(root)
    assert nav.double_click(1000) is False
    assert nav.cam_targ == Vector3()


def test_mouse_double_click_detection(root):
    _select(root)
    nav = Navigator(root)
    nav.mouse(0, True, 10, 10, 1000)
    nav.mouse(0, False, 10, 10, 1050)
    assert nav.clicked_node is root
    assert nav.cam_targ == Vector3()
    assert nav.mouse(0, True, 11, 10, 1200) is True
    assert nav.cam_targ == root.vis_pos


def test_slow_clicks_are_not_double(root):
    _select(root)
    nav = Navigator(root)
    nav.mouse(0, True, 10, 10, 1000)
    nav.mouse(0, False, 10, 10, 1010)
    nav.mouse(0, True, 10, 10, 1000 + 400)
    assert nav.cam_targ == Vector3()


def test_wheel_zoom_clamps(root):
    nav = Navigator(root, cam_dist=0.7)
    assert nav.mouse(3, True, 0, 0, 0) is True
    assert nav.cam_dist == pytest.approx(0.2)
    nav.mouse(3, True, 0, 0, 0)
    assert nav.cam_dist == 0.0
    nav.mouse(4, True, 0, 0, 0)
    assert nav.cam_dist == pytest.approx(0.5)


def test_left_drag_rotates_and_clamps(root):
    nav = Navigator(root)
    nav.mouse(0, True, 100, 100, 5000)
    assert nav.motion(110, 120) is True
    assert nav.cam_theta == pytest.approx(5.0)
    assert nav.cam_phi == pytest.approx(35.0)
    nav.motion(110, 1000)
    assert nav.cam_phi == 90.0
    nav.motion(110, -1000)
    assert nav.cam_phi == 5.0


def test_middle_and_right_drag(root):
    nav = Navigator(root)
    nav.mouse(1, True, 50, 50, 5000)
    nav.motion(50, 40)
    assert nav.cam_y == pytest.approx(1.0)
    nav.mouse(1, False, 50, 40, 5100)
    nav.mouse(2, True, 50, 40, 5200)
    nav.motion(50, 60)
    assert nav.cam_dist == pytest.approx(7.0)


def test_motion_without_buttons(root):
    nav = Navigator(root)
    assert nav.motion(10, 10) is False
    assert nav.cam_theta == 0.0


def test_space_key_hover(root):
    nav = Navigator(root, clicked_node=root)
    assert nav.key_down(" ") is True
    assert nav.hover_file_info is True
    assert nav.clicked_node is None
    assert nav.key_up(" ") is True
    assert nav.hover_file_info is False
    assert nav.key_down("a") is False


def test_escape_exits(root):
    nav = Navigator(root)
    with pytest.raises(SystemExit):
        nav.key_down("\x1b")


def test_main_reports_tree(tmp_path, capsys):
    (tmp_path / "a.txt").write_text("hello")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("x")
    assert main([str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert out.strip() == f"{tmp_path}: 1 directories, 2 files"


def test_main_bad_option(capsys):
    assert main(["-q"]) == 1
    assert "invalid option: -q" in capsys.readouterr().err


def test_main_missing_directory(tmp_path, capsys):
    assert main([str(tmp_path / "absent")]) == 1
    assert "failed to open dir" in capsys.readouterr().err