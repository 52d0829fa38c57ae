"""Tests for the studio's non-interactive helpers."""

import numpy as np
import pytest

from ascii_ripple.config import GridConfig
from ascii_ripple.render import FrameOutput
from ascii_ripple.studio import (MouseRipples, build_session, display_to_buffer,
                                 draw_ascii_canvas, fit_height, get_args, main, prepare_buffer,
                                 parse_canvas_size, run_terminal_canvas, run_terminal_image)


class TestArgs:

    def test_requires_source(self):
        with pytest.raises(SystemExit):
            get_args([])

    def test_defaults(self):
        args = get_args(["--image", "a.png"])
        assert args.cell_width == 6
        assert args.cell_height == 12
        assert args.contrast == 1.5
        assert args.rain is False
        assert args.camera is None

    def test_camera_default_index(self):
        assert get_args(["--camera"]).camera == 0

    def test_build_session(self):
        args = get_args(["--image", "a.png", "--no-directional", "--ripple-count", "3",
                         "--rain-intensity", "5", "--seed", "1"])
        session = build_session(args)
        assert session.render_options.enable_directional_contrast is False
        assert session.ripple_count == 3
        assert session.rain_config.intensity == 5

    def test_missing_image_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["--image", str(tmp_path / "missing.png"), "--no-ui"])
        assert exc.value.code == 1

    def test_bad_export_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--image", str(tmp_path / "a.png"), "--export", "gif"])


class TestBuffers:

    def test_prepare_buffer_width_and_rgb(self):
        bgr = np.zeros((100, 200, 3), dtype=np.uint8)
        bgr[..., 0] = 255  # blue in BGR
        rgb = prepare_buffer(bgr, cols=20, grid=GridConfig())
        assert rgb.shape == (60, 120, 3)
        assert rgb[0, 0].tolist() == [0, 0, 255]

    def test_fit_height(self):
        img = np.zeros((200, 100, 3), dtype=np.uint8)
        assert fit_height(img, 100).shape[:2] == (100, 50)
        assert fit_height(img, 400) is img


class TestCanvas:

    def test_draw_canvas_size(self):
        frame = FrameOutput([["#", " "], [" ", "#"]], cols=2, rows=2)
        canvas = draw_ascii_canvas(frame, font_scale=0.5, thickness=1)
        assert canvas.ndim == 3 and canvas.shape[2] == 3
        assert canvas.any()

    def test_blank_frame_stays_black(self):
        frame = FrameOutput([[" ", " "]], cols=2, rows=1)
        assert not draw_ascii_canvas(frame, 0.5, 1).any()


class TestMouse:

    def test_display_to_buffer(self):
        frame = FrameOutput([[" "] * 10] * 5, cols=10, rows=5)
        x, y = display_to_buffer(50, 100, (100, 200), frame, GridConfig())
        assert (x, y) == (30, 30)

    def test_click_adds_burst(self):
        import cv2 as cv
        session = build_session(get_args(["--image", "a.png", "--ripple-count", "2"]))
        mouse = MouseRipples(session)
        frame = FrameOutput([[" "] * 10] * 5, cols=10, rows=5)
        mouse(cv.EVENT_LBUTTONDOWN, 10, 10, 0, None)
        assert session.ripples == []  # nothing displayed yet
        mouse.update(np.zeros((60, 60, 3), dtype=np.uint8), frame)
        mouse(cv.EVENT_LBUTTONDOWN, 30, 30, 0, None)
        assert len(session.ripples) == 2
        assert (session.ripples[0].origin_x, session.ripples[0].origin_y) == (30, 30)


def test_terminal_image(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    args = get_args(["--image", str(tmp_path / "photo.png"), "--no-ui", "--export", "txt"])
    session = build_session(args)
    buffer = np.full((24, 12, 3), 255, dtype=np.uint8)
    run_terminal_image(args, session, buffer)
    out = capsys.readouterr().out
    assert "Saved:" in out
    assert (tmp_path / "photo_ascii.txt").read_text(encoding="utf-8").count("\n") == 1


class TestCanvasSource:

    @pytest.mark.parametrize("value, expected", [("80x24", (80, 24)), ("3X2", (3, 2))])
    def test_parse_canvas_size(self, value, expected):
        assert parse_canvas_size(value) == expected

    @pytest.mark.parametrize("value", ["80", "0x5", "axb", "1x2x3"])
    def test_bad_canvas_size(self, value):
        with pytest.raises(SystemExit):
            get_args(["--canvas", value])

    def test_canvas_excludes_image(self):
        with pytest.raises(SystemExit):
            get_args(["--canvas", "4x2", "--image", "a.png"])

    def test_terminal_canvas(self, capsys):
        args = get_args(["--canvas", "5x3", "--no-ui"])
        frame = run_terminal_canvas(args, build_session(args))
        assert (frame.cols, frame.rows) == (5, 3)
        printed = capsys.readouterr().out.rstrip("\n").split("\n")
        assert printed == frame.lines()
