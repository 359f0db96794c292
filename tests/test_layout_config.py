import json
from datetime import time

import pytest

from geometry import Rect
from layout_config import load_layout_config, parse_enum, parse_flags, parse_layout_config
from screens import StaticScreenLayout
from wallpaper_specs import (
    FontStyle, InvalidArgumentError, Placement, TextOverlayPosition, WallpaperEffects,
)

DETECTED = StaticScreenLayout([Rect(0, 0, 1920, 1080), Rect(1920, 0, 1280, 1024)])


class ExplodingLayout:
    def screen_bounds(self):
        raise AssertionError("layout should not be queried")


def test_parse_enum_by_name_or_value():
    assert parse_enum(Placement, "uniform-to-fill", "placement") == Placement.UNIFORM_TO_FILL
    assert parse_enum(Placement, "UniformToFill", "placement") == Placement.UNIFORM_TO_FILL
    assert parse_enum(Placement, 4, "placement") == Placement.TILE
    with pytest.raises(InvalidArgumentError, match="placement"):
        parse_enum(Placement, "zoom", "placement")
    with pytest.raises(InvalidArgumentError):
        parse_enum(Placement, 17, "placement")


def test_parse_flags_combines_names():
    effects = parse_flags(WallpaperEffects, ["mirror_left", "flip-vertical"], "effects")
    assert effects == WallpaperEffects.MIRROR_LEFT | WallpaperEffects.FLIP_VERTICAL
    assert parse_flags(FontStyle, "bold", "font_style") == FontStyle.BOLD
    assert parse_flags(FontStyle, [], "font_style") == FontStyle.REGULAR
    assert parse_flags(FontStyle, ["regular"], "font_style") == FontStyle.REGULAR
    assert parse_flags(WallpaperEffects, "none", "effects") == WallpaperEffects.NONE


def test_full_layout(tmp_path):
    data = {
        "mode": "all",
        "dpi": 120,
        "wallpaper": {"placement": "stretch", "background_color": "#102030"},
        "screens": [
            {"bounds": [-1920, 0, 1920, 1080],
             "margins": {"top": 30}},
            {"bounds": [0, 0, 2560, 1440],
             "cycle_randomly": False,
             "static_image": {"image": "logo.png", "placement": "center",
                              "offset": [5, -5], "scale": [10, 10],
                              "effects": ["mirror_right"],
                              "cycle_between": ["08:00", "18:30:00"]},
             "overlays": [{"format": "%DATE%", "position": "top-left",
                           "font_size": 20, "font_style": ["bold", "italic"],
                           "fore_color": "yellow"}]},
        ],
    }
    config = parse_layout_config(data, tmp_path, ExplodingLayout())

    assert config.mode == "all"
    assert config.dpi == 120.0
    assert config.defaults.placement == Placement.STRETCH
    assert config.defaults.spec_for("a.jpg").background_color == "#102030"

    first, second = config.screens
    assert first.index == 0 and first.bounds == Rect(-1920, 0, 1920, 1080)
    assert first.bounds_with_margin == Rect(-1920, 30, 1920, 1050)
    assert first.cycle_randomly

    assert not second.cycle_randomly
    static = second.static_image
    assert static.image_path == tmp_path / "logo.png"
    assert static.placement == Placement.CENTER
    assert static.offset == (5, -5)
    assert static.scale == (10, 10)
    assert static.effects == WallpaperEffects.MIRROR_RIGHT
    assert static.only_cycle_between_start == time(8, 0)
    assert static.only_cycle_between_stop == time(18, 30)

    overlay, = second.overlays
    assert overlay.format == "%DATE%"
    assert overlay.position == TextOverlayPosition.TOP_LEFT
    assert overlay.font_size == 20
    assert overlay.font_style == FontStyle.BOLD | FontStyle.ITALIC
    assert overlay.fore_color == "yellow"


def test_missing_bounds_are_detected():
    config = parse_layout_config({"screens": [{}, {"cycle_randomly": False}]}, layout=DETECTED)
    assert [s.bounds for s in config.screens] == DETECTED.screen_bounds()


def test_missing_screens_use_every_detected_monitor():
    config = parse_layout_config({}, layout=DETECTED)
    assert config.mode == "span"
    assert [s.index for s in config.screens] == [0, 1]
    assert config.defaults.placement == Placement.UNIFORM_TO_FILL


def test_screen_that_is_not_connected():
    with pytest.raises(InvalidArgumentError, match="Screen 2"):
        parse_layout_config({"screens": [{}, {}, {}]}, layout=DETECTED)


@pytest.mark.parametrize("data", [
    {"colour": "red"},
    {"screens": [{"bound": [0, 0, 1, 1]}]},
    {"screens": [{"bounds": [0, 0, 1, 1], "margins": {"inner": 3}}]},
    {"screens": [{"bounds": [0, 0, 1, 1], "overlays": [{"text": "x"}]}]},
    {"wallpaper": {"image": "x.jpg"}},
])
def test_unknown_keys_are_rejected(data):
    with pytest.raises(InvalidArgumentError, match="Unknown key"):
        parse_layout_config(data, layout=DETECTED)


def test_bad_values_are_rejected():
    with pytest.raises(InvalidArgumentError):
        parse_layout_config({"screens": [{"bounds": [0, 0, 10]}]}, layout=DETECTED)
    with pytest.raises(InvalidArgumentError):
        parse_layout_config({"wallpaper": {"offset": 5}}, layout=DETECTED)
    with pytest.raises(InvalidArgumentError):
        parse_layout_config({"screens": [{"bounds": [0, 0, 1, 1], "static_image":
                             {"cycle_between": ["8 am", "noon"]}}]}, layout=DETECTED)


def test_load_from_file(tmp_path):
    path = tmp_path / "layout.json"
    path.write_text(json.dumps({
        "mode": "cloned",
        "screens": [{"bounds": [0, 0, 100, 50],
                     "static_image": {"image": "still.png"}}],
    }))
    config = load_layout_config(path, ExplodingLayout())
    assert config.mode == "cloned"
    assert config.screens[0].static_image.image_path == tmp_path / "still.png"


def test_malformed_json_propagates(tmp_path):
    path = tmp_path / "layout.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_layout_config(path, DETECTED)
    with pytest.raises(OSError):
        load_layout_config(tmp_path / "missing.json", DETECTED)


@pytest.mark.parametrize("data", [
    {"dpi": "high"},
    {"wallpaper": {"offset": ["left", 0]}},
    {"wallpaper": {"scale": [None, 10]}},
    {"screens": [{"bounds": [0, 0, "wide", 10]}]},
    {"screens": [{"bounds": [0, 0, 10, 10], "margins": {"left": "a"}}]},
    {"screens": [{"bounds": [0, 0, 10, 10], "overlays": [{"font_size": "big"}]}]},
    {"screens": [{"bounds": [0, 0, 10, 10], "static_image": {"cycle_between": "08:00"}}]},
    {"screens": [{"bounds": [0, 0, 10, 10],
                  "static_image": {"cycle_between": ["08:00", "09:00", "10:00"]}}]},
])
def test_malformed_values_are_invalid_arguments(data):
    with pytest.raises(InvalidArgumentError):
        parse_layout_config(data, layout=DETECTED)


def test_flags_accept_a_single_integer():
    assert parse_flags(FontStyle, 1, "font_style") == FontStyle.BOLD
