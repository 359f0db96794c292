"""
Outlined text overlays drawn on top of a screen's wallpaper.
"""

import logging
from typing import Sequence

from draw_context import DrawContext
from geometry import Rect
from wallpaper_specs import TextOverlayPosition, TextOverlaySpec

log = logging.getLogger(__name__)

# (horizontal, vertical)
POSITION_ALIGNMENT = {
    TextOverlayPosition.TOP_LEFT: ("near", "near"),
    TextOverlayPosition.TOP_MIDDLE: ("center", "near"),
    TextOverlayPosition.TOP_RIGHT: ("far", "near"),
    TextOverlayPosition.BOTTOM_LEFT: ("near", "far"),
    TextOverlayPosition.BOTTOM_MIDDLE: ("center", "far"),
}
FALLBACK_ALIGNMENT = ("far", "far")


def alignment_for(position) -> tuple[str, str]:
    """Alignment for an overlay position; unknown values go bottom right."""
    return POSITION_ALIGNMENT.get(position, FALLBACK_ALIGNMENT)


def font_size_in_pixels(size_pt: float, dpi: float) -> float:
    return dpi * size_pt / 72


def outline_width(font_px: float) -> float:
    return round(font_px * 0.2, 2)


class OverlayTextRenderer:
    def draw(self, context: DrawContext, dest: Rect,
             overlays: Sequence[TextOverlaySpec | None],
             texts: Sequence[str | None]) -> None:
        """
        Draw each overlay with its already evaluated text, clipped to `dest`.

        `texts` is index-aligned with `overlays`.
        """
        if not overlays:
            return

        with context.clipped(dest):
            for overlay, text in zip(overlays, texts):
                if overlay is None or not text:
                    continue
                text_rect = dest.offset(overlay.horizontal_offset, overlay.vertical_offset)
                font_px = font_size_in_pixels(overlay.font_size, context.dpi)
                log.debug("Overlay %r at %s, %.1fpx", text, text_rect, font_px)
                context.draw_outlined_text(
                    text, text_rect,
                    font_name=overlay.font_name,
                    font_style=overlay.font_style,
                    size_px=font_px,
                    alignment=alignment_for(overlay.position),
                    fill=overlay.fore_color,
                    outline=overlay.border_color,
                    outline_width=outline_width(font_px),
                )
