from PIL import Image

from canvas_fixer import CanvasFixer, rotate_horizontal, rotate_vertical
from geometry import Rect


def gradient(width, height):
    """Every pixel is unique, so rotations are easy to check."""
    image = Image.new("RGB", (width, height))
    image.putdata([(x * 20, y * 50, 0) for y in range(height) for x in range(width)])
    return image


def test_rotate_horizontal_moves_left_columns_to_the_right():
    source = gradient(10, 4)
    result = rotate_horizontal(source, 3)
    assert result.size == source.size
    for x in range(10):
        assert result.getpixel((x, 1)) == source.getpixel(((x + 3) % 10, 1))


def test_rotate_vertical_moves_top_rows_to_the_bottom():
    source = gradient(10, 4)
    result = rotate_vertical(source, 1)
    for y in range(4):
        assert result.getpixel((2, y)) == source.getpixel((2, (y + 1) % 4))


def test_rotate_by_zero_or_full_size_is_a_copy():
    source = gradient(10, 4)
    assert rotate_horizontal(source, 0).tobytes() == source.tobytes()
    assert rotate_horizontal(source, 10).tobytes() == source.tobytes()
    assert rotate_vertical(source, 4).tobytes() == source.tobytes()


def test_fix_round_trip_is_identity():
    source = gradient(10, 4)
    once = CanvasFixer(Rect(-3, 0, 10, 4)).fix(source)
    twice = CanvasFixer(Rect(-7, 0, 10, 4)).fix(once)
    assert once.tobytes() != source.tobytes()
    assert twice.tobytes() == source.tobytes()


def test_fix_vertical_only():
    source = gradient(10, 4)
    fixed = CanvasFixer(Rect(0, -2, 10, 4)).fix(source)
    assert fixed.getpixel((0, 0)) == source.getpixel((0, 2))
    assert fixed.getpixel((0, 2)) == source.getpixel((0, 0))


def test_fix_uses_scaled_offsets():
    source = gradient(5, 2)
    fixed = CanvasFixer(Rect(-4, 0, 10, 4)).fix(source)
    # Half scale: the 4 px left extent becomes 2 px.
    assert fixed.getpixel((0, 0)) == source.getpixel((2, 0))


def test_fix_without_negative_origin_returns_copy():
    source = gradient(10, 4)
    fixed = CanvasFixer(Rect(0, 0, 10, 4)).fix(source)
    assert fixed is not source
    assert fixed.tobytes() == source.tobytes()


def test_fix_on_both_axes_keeps_only_the_vertical_rotation():
    source = gradient(10, 4)
    fixed = CanvasFixer(Rect(-3, -2, 10, 4)).fix(source)
    # Both passes read the unfixed image, so the horizontal one is lost.
    assert fixed.tobytes() == rotate_vertical(source, 2).tobytes()
    assert fixed.tobytes() != rotate_vertical(rotate_horizontal(source, 3), 2).tobytes()
