#!/usr/bin/env python3
"""
ASCII Ripple Studio (OpenCV)
----------------------------
- Supports: image file, video file, live camera feed, or an imageless
  canvas that only shows ripples.
- Shape-matched ASCII: each character is picked by comparing 6 lightness
  samples per cell against the character atlas.
- Left click drops a (cascading) ripple, mouse movement leaves a wake,
  rain mode drops ripples at random.
- Interactive controls via trackbars (live preview):
    * Contrast x10
    * Directional x10
    * Rain (0/1)
- Save output video with --out when processing a video file.
- --no-ui renders to the terminal instead of a window.

Usage:
    ascii-ripple-studio --image path/to/image.jpg
    ascii-ripple-studio --image photo.jpg --rain --seed 7
    ascii-ripple-studio --video path/to/video.mp4 --out ascii_output.mp4
    ascii-ripple-studio --camera 0
    ascii-ripple-studio --canvas 80x24 --rain
    ascii-ripple-studio --image photo.jpg --no-ui --export txt,png

Keys:
    q or ESC  - quit
    s         - save current ASCII frame (PNG)
    r         - toggle rain
    c         - clear ripples
    space     - pause/play (for video/camera)
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime
from typing import Optional, Tuple

import cv2 as cv
import numpy as np

from .config import ConfigurationError, GridConfig, RainConfig, RenderOptions, RippleConfig
from .export import export_frame, parse_export_formats
from .render import FrameOutput
from .ripple import now_ms
from .session import AsciiSession

WINDOW_NAME = "ASCII Ripple Studio"


def parse_canvas_size(value: str) -> Tuple[int, int]:
    """'80x24' -> (80, 24)."""
    try:
        cols, rows = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected COLSxROWS, got {value!r}")
    if cols < 1 or rows < 1:
        raise argparse.ArgumentTypeError(f"Canvas must be at least 1x1, got {value!r}")
    return cols, rows


def get_args(argv=None):
    p = argparse.ArgumentParser(description="ASCII Ripple Studio with OpenCV")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--image", type=str, help="Path to an image file")
    src.add_argument("--video", type=str, help="Path to a video file")
    src.add_argument("--camera", type=int, nargs='?',
                     const=0, help="Camera index (default 0)")
    src.add_argument("--canvas", type=parse_canvas_size, metavar="COLSxROWS",
                     help="Imageless canvas of mid-gray cells, e.g. 80x24")
    p.add_argument("--out", type=str, default=None,
                   help="Output video path (for --video)")
    p.add_argument("--cols", type=int, default=120,
                   help="Target number of character columns (default: 120)")
    p.add_argument("--cell-width", type=int, default=6,
                   help="Sampling cell width in pixels (default: 6)")
    p.add_argument("--cell-height", type=int, default=12,
                   help="Sampling cell height in pixels (default: 12)")
    p.add_argument("--contrast", type=float, default=1.5,
                   help="Global contrast exponent (default: 1.5)")
    p.add_argument("--directional-contrast", type=float, default=2.0,
                   help="Directional contrast exponent (default: 2)")
    p.add_argument("--no-directional", action="store_true",
                   help="Disable directional contrast")
    p.add_argument("--ripple-count", type=int, default=1,
                   help="Ripples per click, 200 ms apart (default: 1)")
    p.add_argument("--no-mouse-ripple", action="store_true",
                   help="Disable ripples that follow the mouse")
    p.add_argument("--rain", action="store_true",
                   help="Start with rain enabled")
    p.add_argument("--rain-intensity", type=float, default=3.0,
                   help="Raindrops per second (default: 3)")
    p.add_argument("--rain-variation", type=float, default=0.3,
                   help="Random variation of raindrop ripples, 0..1 (default: 0.3)")
    p.add_argument("--seed", type=int, default=None,
                   help="Seed for rain randomness")
    p.add_argument("--fps", type=float, default=15.0,
                   help="Source frame rate for video/camera (default: 15)")
    p.add_argument("--font-scale", type=float, default=0.35,
                   help="cv2.putText fontScale (default: 0.35)")
    p.add_argument("--thickness", type=int, default=1,
                   help="cv2.putText thickness (default: 1)")
    p.add_argument("--max-height", type=int, default=1080,
                   help="Max preview window height (default: 1080)")
    p.add_argument("--no-ui", action="store_true",
                   help="Render to the terminal instead of a window")
    p.add_argument("--seconds", type=float, default=5.0,
                   help="Terminal animation length for --image with --rain (default: 5)")
    p.add_argument("--export", type=str, default=None,
                   help="Export formats for --image: txt,png,all")
    p.add_argument("--verbose", action="store_true",
                   help="Enable debug logging")
    return p.parse_args(argv)


def build_session(args) -> AsciiSession:
    grid = GridConfig(cell_width=args.cell_width, cell_height=args.cell_height)
    options = RenderOptions(contrast=args.contrast,
                            directional_contrast=args.directional_contrast,
                            enable_directional_contrast=not args.no_directional)
    rain = RainConfig(intensity=args.rain_intensity, variation=args.rain_variation)
    return AsciiSession(grid_config=grid, render_options=options,
                        ripple_config=RippleConfig(), ripple_count=args.ripple_count,
                        rain_config=rain, rng=np.random.default_rng(args.seed))


def prepare_buffer(frame_bgr: np.ndarray, cols: int, grid: GridConfig) -> np.ndarray:
    """Resize a BGR frame to ``cols`` cells wide (aspect kept) and convert to RGB."""
    h, w = frame_bgr.shape[:2]
    target_w = max(grid.cell_width, cols * grid.cell_width)
    target_h = max(grid.cell_height, int(round(h * target_w / w)))
    resized = cv.resize(frame_bgr, (target_w, target_h), interpolation=cv.INTER_AREA)
    return cv.cvtColor(resized, cv.COLOR_BGR2RGB)


def compute_cell_size(font_scale: float, thickness: int, font_face: int = cv.FONT_HERSHEY_SIMPLEX) -> Tuple[int, int, int]:
    # Use 'M' as a tall/wide reference glyph to size cells
    (w, h), baseline = cv.getTextSize("M", font_face, font_scale, thickness)
    pad_w = max(1, int(round(w * 0.15)))
    pad_h = max(1, int(round(h * 0.10)))
    return w + pad_w, h + pad_h + baseline, h


def draw_ascii_canvas(frame: FrameOutput, font_scale: float, thickness: int,
                      color=(230, 230, 230)) -> np.ndarray:
    """Draw a character grid onto a black BGR canvas with cv2.putText."""
    cell_w, cell_h, glyph_h = compute_cell_size(font_scale, thickness)
    canvas = np.zeros((max(1, frame.rows * cell_h), max(1, frame.cols * cell_w), 3), dtype=np.uint8)
    for i, row in enumerate(frame.chars):
        y = i * cell_h + glyph_h  # baseline y
        for j, ch in enumerate(row):
            if ch == " ":
                continue
            cv.putText(canvas, ch, (j * cell_w, y), cv.FONT_HERSHEY_SIMPLEX,
                       font_scale, color, thickness, lineType=cv.LINE_AA)
    return canvas


def fit_height(image: np.ndarray, max_height: int) -> np.ndarray:
    if image.shape[0] <= max_height:
        return image
    scale = max_height / image.shape[0]
    return cv.resize(image, (max(1, int(image.shape[1] * scale)), max_height),
                     interpolation=cv.INTER_AREA)


def display_to_buffer(x: float, y: float, display_size: Tuple[int, int],
                      frame: FrameOutput, grid: GridConfig) -> Tuple[float, float]:
    """Map a point on the displayed canvas to sampling-buffer pixels."""
    disp_w, disp_h = display_size
    return (x / max(1, disp_w) * frame.cols * grid.cell_width,
            y / max(1, disp_h) * frame.rows * grid.cell_height)


class MouseRipples:
    """cv.setMouseCallback handler feeding clicks and moves into a session."""

    def __init__(self, session: AsciiSession, follow_mouse: bool = True):
        self.session = session
        self.follow_mouse = follow_mouse
        self.display_size: Optional[Tuple[int, int]] = None
        self.frame: Optional[FrameOutput] = None

    def update(self, display: np.ndarray, frame: FrameOutput):
        self.display_size = (display.shape[1], display.shape[0])
        self.frame = frame

    def __call__(self, event, x, y, flags, param):
        if self.display_size is None or self.frame is None:
            return
        bx, by = display_to_buffer(x, y, self.display_size, self.frame, self.session.grid_config)
        if event == cv.EVENT_LBUTTONDOWN:
            self.session.click(bx, by, now_ms())
        elif event == cv.EVENT_MOUSEMOVE and self.follow_mouse:
            self.session.mouse_move(bx, by, now_ms())


def ensure_window(name: str):
    try:
        cv.namedWindow(name, cv.WINDOW_NORMAL)
    except cv.error as e:
        print(f"[WARN] Could not create window: {e}")


def build_ui(win: str, session: AsciiSession, mouse: MouseRipples):
    ensure_window(win)
    cv.resizeWindow(win, 1280, 720)
    options = session.render_options
    cv.createTrackbar("Contrast x10", win, int(options.contrast * 10), 50, lambda v: None)
    cv.createTrackbar("Directional x10", win, int(options.directional_contrast * 10), 50, lambda v: None)
    cv.createTrackbar("Rain (0/1)", win, int(session.rain_enabled), 1, lambda v: None)
    cv.setMouseCallback(win, mouse)


def read_ui(win: str, fallback_options: RenderOptions, fallback_rain: bool) -> Tuple[RenderOptions, bool]:
    # If window not visible, just return fallback values
    if cv.getWindowProperty(win, cv.WND_PROP_VISIBLE) < 1:
        return fallback_options, fallback_rain
    try:
        contrast10 = cv.getTrackbarPos("Contrast x10", win)
        directional10 = cv.getTrackbarPos("Directional x10", win)
        rain = bool(cv.getTrackbarPos("Rain (0/1)", win))
    except cv.error:
        # Trackbars not ready yet
        return fallback_options, fallback_rain
    options = RenderOptions(contrast=contrast10 / 10.0,
                            directional_contrast=directional10 / 10.0,
                            enable_directional_contrast=fallback_options.enable_directional_contrast)
    return options, rain


def sync_ui(win: str, session: AsciiSession, now: float):
    options, rain = read_ui(win, session.render_options, session.rain_enabled)
    session.render_options = options
    if rain != session.rain_enabled:
        session.set_rain(rain, now)


def set_rain_trackbar(win: str, enabled: bool):
    try:
        cv.setTrackbarPos("Rain (0/1)", win, int(enabled))
    except cv.error:
        pass


def save_frame_png(image: np.ndarray, prefix: str = "ascii_frame") -> str:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    fname = f"{prefix}_{ts}.png"
    cv.imwrite(fname, image)
    return os.path.abspath(fname)


def handle_key(key: int, win: str, session: AsciiSession, ascii_img: Optional[np.ndarray]) -> str:
    """Apply a key press; returns 'quit', 'pause' or ''."""
    if key in (27, ord('q')):  # ESC or q
        return "quit"
    if key == ord('s') and ascii_img is not None:
        print(f"Saved: {save_frame_png(ascii_img)}")
    elif key == ord('r'):
        session.set_rain(not session.rain_enabled, now_ms())
        set_rain_trackbar(win, session.rain_enabled)
    elif key == ord('c'):
        session.clear()
    elif key == 32:  # space
        return "pause"
    return ""


def print_frame(frame: FrameOutput):
    sys.stdout.write("\033[H\033[J")  # Clear terminal
    sys.stdout.write(frame.to_text() + "\n")
    sys.stdout.flush()


def process_image(args):
    img = cv.imread(args.image)
    if img is None:
        print(f"Failed to read image: {args.image}")
        return
    session = build_session(args)
    buffer = prepare_buffer(img, args.cols, session.grid_config)
    session.set_rain(args.rain, now_ms())

    if args.no_ui:
        run_terminal_image(args, session, buffer)
        return

    mouse = MouseRipples(session, follow_mouse=not args.no_mouse_ripple)
    build_ui(WINDOW_NAME, session, mouse)
    ascii_img = None
    last_options = None

    while True:
        now = now_ms()
        sync_ui(WINDOW_NAME, session, now)
        # Static image: only re-render while something moves or settings change
        if ascii_img is None or session.is_animating(now) or session.ripples \
                or session.render_options != last_options:
            frame = session.tick(buffer, now)
            last_options = session.render_options
            ascii_img = draw_ascii_canvas(frame, args.font_scale, args.thickness)
            disp = fit_height(ascii_img, args.max_height)
            mouse.update(disp, frame)
            cv.imshow(WINDOW_NAME, disp)

        key = cv.waitKey(30) & 0xFF
        if handle_key(key, WINDOW_NAME, session, ascii_img) == "quit":
            break

    cv.destroyAllWindows()


def run_terminal_image(args, session: AsciiSession, buffer: np.ndarray):
    frame = session.tick(buffer, now_ms())
    if session.rain_enabled:
        end = time.monotonic() + args.seconds
        delay = 1.0 / max(1.0, args.fps)
        while time.monotonic() < end:
            frame = session.tick(buffer, now_ms())
            print_frame(frame)
            time.sleep(delay)
    else:
        print(frame.to_text())

    if args.export:
        base_name = os.path.splitext(os.path.basename(args.image))[0]
        for path in export_frame(frame, base_name, parse_export_formats(args.export)):
            print(f"Saved: {path}")


def process_canvas(args):
    cols, rows = args.canvas
    session = build_session(args)
    session.set_rain(args.rain, now_ms())

    if args.no_ui:
        run_terminal_canvas(args, session)
        return

    mouse = MouseRipples(session, follow_mouse=not args.no_mouse_ripple)
    build_ui(WINDOW_NAME, session, mouse)
    ascii_img = None

    while True:
        now = now_ms()
        sync_ui(WINDOW_NAME, session, now)
        if ascii_img is None or session.is_animating(now) or session.ripples:
            frame = session.tick_canvas(cols, rows, now)
            ascii_img = draw_ascii_canvas(frame, args.font_scale, args.thickness)
            disp = fit_height(ascii_img, args.max_height)
            mouse.update(disp, frame)
            cv.imshow(WINDOW_NAME, disp)

        key = cv.waitKey(30) & 0xFF
        if handle_key(key, WINDOW_NAME, session, ascii_img) == "quit":
            break

    cv.destroyAllWindows()


def run_terminal_canvas(args, session: AsciiSession) -> FrameOutput:
    cols, rows = args.canvas
    frame = session.tick_canvas(cols, rows, now_ms())
    if session.rain_enabled:
        end = time.monotonic() + args.seconds
        delay = 1.0 / max(1.0, args.fps)
        while time.monotonic() < end:
            frame = session.tick_canvas(cols, rows, now_ms())
            print_frame(frame)
            time.sleep(delay)
    else:
        print(frame.to_text())
    return frame


def process_stream(capture: cv.VideoCapture, args, is_video: bool):
    if not capture.isOpened():
        print("Failed to open capture source")
        return

    session = build_session(args)
    session.set_rain(args.rain, now_ms())
    frame_interval = 1000.0 / max(0.1, args.fps)

    writer = None
    fourcc = None
    if is_video and args.out:
        # Writer is created once the first ASCII frame gives us a size
        fourcc = cv.VideoWriter_fourcc(
            *"mp4v") if args.out.lower().endswith(".mp4") else cv.VideoWriter_fourcc(*"XVID")

    mouse = MouseRipples(session, follow_mouse=not args.no_mouse_ripple)
    if not args.no_ui:
        build_ui(WINDOW_NAME, session, mouse)

    buffer = None
    ascii_img = None
    last_capture = None
    paused = False

    while True:
        now = now_ms()
        captured = False
        if not paused and (last_capture is None or now - last_capture >= frame_interval):
            ret, src = capture.read()
            if not ret or src is None:
                break
            buffer = prepare_buffer(src, args.cols, session.grid_config)
            last_capture = now
            captured = True

        if not args.no_ui:
            sync_ui(WINDOW_NAME, session, now)

        # New source frame, or paused/between frames with ripples still moving
        if captured or session.is_animating(now):
            frame = session.tick(buffer, now)
            if args.no_ui:
                print_frame(frame)
            else:
                ascii_img = draw_ascii_canvas(frame, args.font_scale, args.thickness)
                disp = fit_height(ascii_img, args.max_height)
                mouse.update(disp, frame)
                cv.imshow(WINDOW_NAME, disp)

            if captured and fourcc is not None:
                if ascii_img is None:
                    ascii_img = draw_ascii_canvas(frame, args.font_scale, args.thickness)
                if writer is None:
                    fps = capture.get(cv.CAP_PROP_FPS)
                    if not fps or fps <= 0 or fps > 120:
                        fps = 25.0  # fallback
                    h, w = ascii_img.shape[:2]
                    writer = cv.VideoWriter(args.out, fourcc, min(fps, args.fps), (w, h))
                    if not writer.isOpened():
                        print("[WARN] failed to open VideoWriter; proceeding without saving.")
                        writer = None
                        fourcc = None
                if writer is not None:
                    writer.write(ascii_img)

        if args.no_ui:
            time.sleep(frame_interval / 1000.0)
            continue

        key = cv.waitKey(1) & 0xFF
        action = handle_key(key, WINDOW_NAME, session, ascii_img)
        if action == "quit":
            break
        if action == "pause":
            paused = not paused

    if writer is not None:
        writer.release()
    capture.release()
    cv.destroyAllWindows()


def main(argv=None):
    args = get_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    if args.export:
        try:
            parse_export_formats(args.export)
        except ValueError as e:
            print(e)
            sys.exit(1)

    try:
        if args.canvas:
            process_canvas(args)
            return

        if args.image:
            if not os.path.isfile(args.image):
                print(f"Image not found: {args.image}")
                sys.exit(1)
            process_image(args)
            return

        if args.video:
            if not os.path.isfile(args.video):
                print(f"Video not found: {args.video}")
                sys.exit(1)
            cap = cv.VideoCapture(args.video)
            process_stream(cap, args, is_video=True)
            return

        if args.camera is not None:
            cap = cv.VideoCapture(args.camera)
            if not cap.isOpened():
                print(f"Failed to open camera index {args.camera}")
                sys.exit(1)
            process_stream(cap, args, is_video=False)
            return
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
