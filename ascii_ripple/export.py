"""Text and PNG export of rendered frames."""

import os
from typing import Iterable, List, Optional, Union

from PIL import Image, ImageDraw, ImageFont

from .render import FrameOutput

EXPORT_FORMATS = ("txt", "png")


def frame_to_text(frame: Union[FrameOutput, str]) -> str:
    return frame if isinstance(frame, str) else frame.to_text()


def parse_export_formats(value: str) -> List[str]:
    """'txt,png' / 'all' -> list of formats. Unknown names raise ValueError."""
    if value == "all":
        return list(EXPORT_FORMATS)
    formats = [f.strip().lower() for f in value.split(",") if f.strip()]
    unknown = [f for f in formats if f not in EXPORT_FORMATS]
    if unknown:
        raise ValueError(f"Unsupported export format(s): {', '.join(unknown)}")
    return formats


def render_text_image(text: str, font_path: Optional[str] = None, font_size: int = 10,
                      fg=(0, 0, 0), bg=(255, 255, 255)) -> Image.Image:
    """Draw ASCII text onto a Pillow image with uniform (monospaced) spacing."""
    try:
        font = ImageFont.truetype(font_path, font_size) if font_path and os.path.exists(
            font_path) else ImageFont.load_default()
    except OSError:
        font = ImageFont.load_default()

    lines = text.split("\n")
    # 'W' is the widest glyph; force every cell to that width
    char_bbox = font.getbbox("W")
    char_width = max(1, char_bbox[2] - char_bbox[0])
    line_height = char_bbox[3] - char_bbox[1] + 2

    max_line_len = max(len(line) for line in lines)
    img_width = max(1, max_line_len * char_width)
    img_height = max(1, len(lines) * line_height)

    img = Image.new("RGB", (img_width, img_height), bg)
    draw = ImageDraw.Draw(img)
    y = 0
    for line in lines:
        x = 0
        for char in line:
            if char != " ":
                draw.text((x, y), char, font=font, fill=fg)
            x += char_width
        y += line_height
    return img


def save_text(frame: Union[FrameOutput, str], path: str) -> str:
    with open(path, "w", encoding="utf-8") as f:
        f.write(frame_to_text(frame))
    return os.path.abspath(path)


def save_png(frame: Union[FrameOutput, str], path: str, **kwargs) -> str:
    render_text_image(frame_to_text(frame), **kwargs).save(path)
    return os.path.abspath(path)


def export_frame(frame: Union[FrameOutput, str], base_name: str,
                 formats: Iterable[str] = EXPORT_FORMATS) -> List[str]:
    """Write ``<base_name>_ascii.<fmt>`` for each format; returns absolute paths."""
    saved = []
    for fmt in formats:
        path = f"{base_name}_ascii.{fmt}"
        saved.append(save_text(frame, path) if fmt == "txt" else save_png(frame, path))
    return saved
