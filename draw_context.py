"""
Minimal scoped drawing surface on top of a Pillow image.

Pillow has no notion of a current transform or clip region, so DrawContext
keeps both itself and maps every rectangle it is given to device pixels.
Clip and transform changes are only available as context managers, which
restore the previous state when the block exits (also on exceptions).

Device rectangles are computed by mapping both corners through the current
transform and rounding them independently, so two rectangles sharing an edge
in local coordinates also share it on the canvas.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass

from PIL import Image, ImageColor, ImageDraw, ImageFont

from geometry import Rect
from wallpaper_specs import FontStyle

log = logging.getLogger(__name__)

DEFAULT_DPI = 96.0

# File name suffixes tried for each style, e.g. DejaVuSans-Bold.ttf, verdanab.ttf
STYLE_SUFFIXES = {
    FontStyle.REGULAR: ["", "-Regular"],
    FontStyle.BOLD: ["-Bold", "bd", "b"],
    FontStyle.ITALIC: ["-Italic", "-Oblique", "i"],
    FontStyle.BOLD | FontStyle.ITALIC: ["-BoldItalic", "-BoldOblique", "bi", "z"],
}


@dataclass(frozen=True)
class Transform:
    """Axis-aligned affine map: device = local * scale + translate."""

    scale_x: float = 1.0
    scale_y: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def translated(self, dx: float, dy: float) -> "Transform":
        # Prepended: the translation applies to local coordinates first.
        return Transform(
            self.scale_x, self.scale_y,
            self.translate_x + dx * self.scale_x,
            self.translate_y + dy * self.scale_y,
        )

    def scaled(self, kx: float, ky: float) -> "Transform":
        return Transform(self.scale_x * kx, self.scale_y * ky, self.translate_x, self.translate_y)

    def map_point(self, x: float, y: float) -> tuple[float, float]:
        return x * self.scale_x + self.translate_x, y * self.scale_y + self.translate_y

    def map_rect(self, rect: Rect) -> tuple[int, int, int, int, bool, bool]:
        """Device box (x0, y0, x1, y1) plus whether each axis got mirrored."""
        x0, y0 = self.map_point(rect.left, rect.top)
        x1, y1 = self.map_point(rect.right, rect.bottom)
        x0, y0, x1, y1 = round(x0), round(y0), round(x1), round(y1)
        flip_x = x1 < x0
        flip_y = y1 < y0
        if flip_x:
            x0, x1 = x1, x0
        if flip_y:
            y0, y1 = y1, y0
        return x0, y0, x1, y1, flip_x, flip_y


def _intersect(a, b):
    x0, y0 = max(a[0], b[0]), max(a[1], b[1])
    x1, y1 = min(a[2], b[2]), min(a[3], b[3])
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1


def _font_candidates(name: str, style: FontStyle):
    if "/" in name or name.lower().endswith((".ttf", ".otf", ".ttc")):
        yield name
        return
    suffixes = STYLE_SUFFIXES.get(style & (FontStyle.BOLD | FontStyle.ITALIC), [""])
    for base in (name, name.replace(" ", ""), name.lower().replace(" ", "")):
        for suffix in suffixes:
            yield f"{base}{suffix}.ttf"
    yield name


def load_font(name: str, style: FontStyle, size_px: float) -> ImageFont.ImageFont:
    """Load a TrueType font by family or file name, falling back to Pillow's default."""
    size = max(1, round(size_px))
    for candidate in _font_candidates(name, style):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    log.warning("Font %r not found, using Pillow's default font", name)
    return ImageFont.load_default(size)


def to_rgba(color) -> tuple[int, int, int, int]:
    if isinstance(color, str):
        color = ImageColor.getrgb(color)
    color = tuple(color)
    if len(color) == 3:
        color = color + (255,)
    return color


class DrawContext:
    def __init__(self, image: Image.Image, dpi: float = DEFAULT_DPI):
        self.image = image
        self.dpi = dpi
        self.transform = Transform()
        self._clip = None

    @property
    def canvas_box(self):
        return 0, 0, self.image.width, self.image.height

    @property
    def clip_box(self):
        """Current clip in device pixels, already limited to the canvas."""
        if self._clip is None:
            return self.canvas_box
        return _intersect(self._clip, self.canvas_box)

    @contextmanager
    def clipped(self, rect: Rect):
        """Replace the clip region with `rect` for the duration of the block."""
        previous = self._clip
        x0, y0, x1, y1, _, _ = self.transform.map_rect(rect)
        # An empty or negative rect clips everything away.
        self._clip = (x0, y0, max(x0, x1), max(y0, y1)) if not rect.is_empty() else (0, 0, 0, 0)
        try:
            yield self
        finally:
            self._clip = previous

    @contextmanager
    def transformed(self, transform: Transform):
        previous = self.transform
        self.transform = transform
        try:
            yield self
        finally:
            self.transform = previous

    def _visible(self, box):
        clip = self.clip_box
        if clip is None:
            return None
        return _intersect(box, clip)

    def fill_rect(self, rect: Rect, color) -> None:
        if rect.is_empty():
            return
        x0, y0, x1, y1, _, _ = self.transform.map_rect(rect)
        visible = self._visible((x0, y0, x1, y1))
        if visible is None:
            return
        draw = ImageDraw.Draw(self.image, "RGBA")
        draw.rectangle(
            [visible[0], visible[1], visible[2] - 1, visible[3] - 1],
            fill=to_rgba(color),
        )

    def draw_image(self, image: Image.Image, rect: Rect) -> None:
        """Draw `image` scaled into `rect` (local coordinates)."""
        if rect.width == 0 or rect.height == 0:
            return
        x0, y0, x1, y1, flip_x, flip_y = self.transform.map_rect(rect)
        width, height = x1 - x0, y1 - y0
        if width <= 0 or height <= 0:
            return
        visible = self._visible((x0, y0, x1, y1))
        if visible is None:
            return

        if flip_x:
            image = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        if flip_y:
            image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)

        size = (visible[2] - visible[0], visible[3] - visible[1])
        if (width, height) == image.size:
            part = image.crop((
                visible[0] - x0, visible[1] - y0,
                visible[2] - x0, visible[3] - y0,
            ))
        else:
            sx = image.width / width
            sy = image.height / height
            box = (
                (visible[0] - x0) * sx, (visible[1] - y0) * sy,
                (visible[2] - x0) * sx, (visible[3] - y0) * sy,
            )
            part = image.resize(size, Image.Resampling.LANCZOS, box=box)

        if part.mode == "RGBA":
            self.image.paste(part, visible[:2], part)
        else:
            self.image.paste(part.convert(self.image.mode), visible[:2])

    def draw_outlined_text(self, text: str, rect: Rect, *, font_name: str,
                           font_style: FontStyle, size_px: float,
                           alignment: tuple[str, str], fill, outline,
                           outline_width: float) -> None:
        """
        Draw `text` aligned inside `rect` with an outline.

        `alignment` is (horizontal, vertical), each "near", "center" or "far".
        The text neither wraps nor gets clipped to `rect`; only the current
        clip region limits it.
        """
        if not text:
            return
        visible = self.clip_box
        if visible is None:
            return
        x0, y0, x1, y1, _, _ = self.transform.map_rect(rect)
        scale = abs(self.transform.scale_y)
        font = load_font(font_name, font_style, size_px * scale)
        # Pillow strokes outward only; a pen is centered on the glyph outline.
        stroke = max(1, round(outline_width * scale / 2)) if outline_width > 0 else 0

        horizontal, vertical = alignment
        align = {"near": "left", "center": "center", "far": "right"}[horizontal]
        layer = Image.new("RGBA", (visible[2] - visible[0], visible[3] - visible[1]), (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        left, top, right, bottom = draw.multiline_textbbox(
            (0, 0), text, font=font, align=align, stroke_width=stroke,
        )
        text_width, text_height = right - left, bottom - top

        if horizontal == "near":
            tx = x0
        elif horizontal == "center":
            tx = (x0 + x1) / 2 - text_width / 2
        else:
            tx = x1 - text_width
        if vertical == "near":
            ty = y0
        elif vertical == "center":
            ty = (y0 + y1) / 2 - text_height / 2
        else:
            ty = y1 - text_height

        draw.multiline_text(
            (tx - left - visible[0], ty - top - visible[1]), text,
            font=font, fill=to_rgba(fill), align=align,
            stroke_width=stroke, stroke_fill=to_rgba(outline),
        )
        self.image.paste(layer, visible[:2], layer)
