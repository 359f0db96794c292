from PIL import Image

from draw_context import DrawContext
from geometry import Rect
from overlay_text import (
    FALLBACK_ALIGNMENT, OverlayTextRenderer, alignment_for, font_size_in_pixels, outline_width,
)
from tests.helpers import BLUE, colors
from wallpaper_specs import TextOverlayPosition, TextOverlaySpec


def test_alignment_for_every_position():
    assert alignment_for(TextOverlayPosition.TOP_LEFT) == ("near", "near")
    assert alignment_for(TextOverlayPosition.TOP_MIDDLE) == ("center", "near")
    assert alignment_for(TextOverlayPosition.TOP_RIGHT) == ("far", "near")
    assert alignment_for(TextOverlayPosition.BOTTOM_LEFT) == ("near", "far")
    assert alignment_for(TextOverlayPosition.BOTTOM_MIDDLE) == ("center", "far")
    assert alignment_for(TextOverlayPosition.BOTTOM_RIGHT) == ("far", "far")


def test_undefined_position_falls_back_to_bottom_right():
    assert alignment_for(42) == FALLBACK_ALIGNMENT == ("far", "far")


def test_font_size_and_outline():
    assert font_size_in_pixels(12, 96) == 16
    assert font_size_in_pixels(12, 144) == 24
    assert outline_width(16) == 3.2
    assert outline_width(13.33) == 2.67


def blue_canvas():
    return Image.new("RGB", (200, 100), BLUE)


def test_no_overlays_draw_nothing():
    canvas = blue_canvas()
    OverlayTextRenderer().draw(DrawContext(canvas), Rect(0, 0, 200, 100), [], [])
    assert colors(canvas) == {BLUE}


def test_none_overlays_and_empty_texts_are_skipped():
    canvas = blue_canvas()
    overlays = [None, TextOverlaySpec()]
    OverlayTextRenderer().draw(DrawContext(canvas), Rect(0, 0, 200, 100), overlays, ["A", ""])
    assert colors(canvas) == {BLUE}


def _has_white(image):
    return any(min(p) > 200 for p in image.getdata())


def test_top_left_text_lands_top_left():
    canvas = blue_canvas()
    overlay = TextOverlaySpec(position=TextOverlayPosition.TOP_LEFT, font_size=18)
    OverlayTextRenderer().draw(DrawContext(canvas), Rect(0, 0, 200, 100), [overlay], ["Hi"])
    assert _has_white(canvas.crop((0, 0, 100, 50)))
    assert colors(canvas, (100, 50, 200, 100)) == {BLUE}


def test_offsets_move_text():
    canvas = blue_canvas()
    overlay = TextOverlaySpec(position=TextOverlayPosition.TOP_LEFT, font_size=18,
                              horizontal_offset=120, vertical_offset=50)
    OverlayTextRenderer().draw(DrawContext(canvas), Rect(0, 0, 200, 100), [overlay], ["Hi"])
    assert colors(canvas, (0, 0, 110, 45)) == {BLUE}
    assert _has_white(canvas.crop((120, 50, 200, 100)))


def test_text_is_clipped_to_destination():
    canvas = blue_canvas()
    overlay = TextOverlaySpec(position=TextOverlayPosition.BOTTOM_RIGHT, font_size=18,
                              horizontal_offset=30)
    dest = Rect(0, 0, 100, 100)
    OverlayTextRenderer().draw(DrawContext(canvas), dest, [overlay], ["Hello"])
    assert colors(canvas, (100, 0, 200, 100)) == {BLUE}
