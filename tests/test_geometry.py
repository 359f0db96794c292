import itertools

from geometry import Rect, union_all


def test_union_is_order_independent():
    rects = [Rect(-1920, 0, 1920, 1080), Rect(0, -200, 2560, 1440), Rect(2560, 100, 1080, 1920)]
    expected = Rect(-1920, -200, 1920 + 2560 + 1080, 200 + 1920 + 100)
    for order in itertools.permutations(rects):
        assert union_all(order) == expected


def test_union_all_of_nothing_is_none():
    assert union_all([]) is None


def test_edges():
    rect = Rect(-10, 5, 30, 20)
    assert (rect.left, rect.top, rect.right, rect.bottom) == (-10, 5, 20, 25)


def test_uniform_letterboxes_wide_content():
    assert Rect(0, 0, 100, 100).uniform(200, 100) == Rect(0, 25, 100, 50)


def test_uniform_to_fill_crops_wide_content():
    assert Rect(0, 0, 100, 100).uniform_to_fill(200, 100) == Rect(-50, 0, 200, 100)


def test_center_truncates_halves():
    assert Rect(0, 0, 5, 5).center(2, 2) == Rect(1, 1, 2, 2)
    assert Rect(10, 10, 100, 50).center(20, 10) == Rect(50, 30, 20, 10)


def test_scale_full_truncates_toward_zero():
    assert Rect(-1921, 0, 3841, 1081).scale_full(0.5) == Rect(-960, 0, 1920, 540)


def test_negative_size_is_empty():
    assert Rect(0, 0, -5, 10).is_empty()
    assert not Rect(0, 0, 1, 1).is_empty()
