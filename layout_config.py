"""
Load screen layouts and wallpaper settings from a JSON file.

Example:

  {
    "mode": "span",
    "screens": [
      {"bounds": [-1920, 0, 1920, 1080]},
      {"bounds": [0, 0, 2560, 1440], "cycle_randomly": false,
       "static_image": {"image": "logo.png", "placement": "center",
                        "background_color": "#202020"},
       "overlays": [{"format": "%WALLPAPER1%", "position": "bottom-right"}]}
    ],
    "wallpaper": {"placement": "uniform-to-fill"}
  }

Screens without "bounds" are measured with screeninfo. Relative image paths are
resolved against the directory of the JSON file.
"""

import json
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path

from geometry import Rect
from screens import ScreenLayout, ScreenMargins, ScreenRegion, ScreeninfoScreenLayout
from wallpaper_specs import (
    FontStyle, InvalidArgumentError, Placement, TextOverlayPosition, TextOverlaySpec,
    WallpaperEffects, WallpaperSpec, WallpaperSpecDefaults,
)

DEFAULT_MODE = "span"
DEFAULT_DPI = 96.0

TOP_LEVEL_KEYS = {"mode", "dpi", "screens", "wallpaper"}
SCREEN_KEYS = {"bounds", "cycle_randomly", "margins", "static_image", "overlays"}
WALLPAPER_KEYS = {"image", "placement", "offset", "scale", "effects",
                  "background_color", "cycle_between"}
OVERLAY_KEYS = {"format", "position", "horizontal_offset", "vertical_offset",
                "font_name", "font_size", "font_style", "fore_color", "border_color"}
MARGIN_KEYS = {"left", "top", "right", "bottom"}


@dataclass
class LayoutConfig:
    mode: str = DEFAULT_MODE
    dpi: float = DEFAULT_DPI
    screens: list[ScreenRegion] = field(default_factory=list)
    defaults: WallpaperSpecDefaults = field(default_factory=WallpaperSpecDefaults)


def _normalize(name: str) -> str:
    return name.lower().replace("_", "").replace("-", "").replace(" ", "")


def _check_keys(data: dict, allowed: set, where: str) -> None:
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"{where} must be an object")
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise InvalidArgumentError(f"Unknown key(s) in {where}: {', '.join(unknown)}")


def parse_enum(enum_cls, value, key: str):
    """Enum member by (case/underscore-insensitive) name or by integer value."""
    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError:
            raise InvalidArgumentError(f"Invalid {key}: {value!r}") from None
    # __members__ also lists zero-valued flags such as REGULAR and NONE.
    for member in enum_cls.__members__.values():
        if _normalize(member.name) == _normalize(str(value)):
            return member
    raise InvalidArgumentError(f"Invalid {key}: {value!r}")


def parse_flags(flag_cls, values, key: str):
    result = flag_cls(0)
    if isinstance(values, (str, int)):
        values = [values]
    for value in values:
        result |= parse_enum(flag_cls, value, key)
    return result


def _number(convert, value, key: str):
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid number in {key}: {value!r}") from None


def _pair(value, key: str) -> tuple[int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidArgumentError(f"{key} must be a [x, y] pair")
    return _number(int, value[0], key), _number(int, value[1], key)


def _time(value: str, key: str) -> time:
    try:
        return time.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid time in {key}: {value!r}") from None


def parse_wallpaper(data: dict, base_dir: Path) -> WallpaperSpec:
    _check_keys(data, WALLPAPER_KEYS, "wallpaper")
    spec = WallpaperSpec()
    if data.get("image"):
        spec.image_path = base_dir / Path(data["image"]).expanduser()
    if "placement" in data:
        spec.placement = parse_enum(Placement, data["placement"], "placement")
    if "offset" in data:
        spec.offset = _pair(data["offset"], "offset")
    if "scale" in data:
        spec.scale = _pair(data["scale"], "scale")
    if "effects" in data:
        spec.effects = parse_flags(WallpaperEffects, data["effects"], "effects")
    if "background_color" in data:
        spec.background_color = data["background_color"]
    if "cycle_between" in data:
        window = data["cycle_between"]
        if not isinstance(window, (list, tuple)) or len(window) != 2:
            raise InvalidArgumentError("cycle_between must be a [start, stop] pair")
        start, stop = window
        spec.only_cycle_between_start = _time(start, "cycle_between")
        spec.only_cycle_between_stop = _time(stop, "cycle_between")
    return spec


def parse_defaults(data: dict) -> WallpaperSpecDefaults:
    _check_keys(data, WALLPAPER_KEYS - {"image", "cycle_between"}, "wallpaper defaults")
    spec = parse_wallpaper(data, Path("."))
    return WallpaperSpecDefaults(
        placement=spec.placement if "placement" in data else WallpaperSpecDefaults.placement,
        offset=spec.offset,
        scale=spec.scale,
        effects=spec.effects,
        background_color=spec.background_color,
    )


def parse_overlay(data: dict) -> TextOverlaySpec:
    _check_keys(data, OVERLAY_KEYS, "overlay")
    overlay = TextOverlaySpec()
    if "format" in data:
        overlay.format = str(data["format"])
    if "position" in data:
        overlay.position = parse_enum(TextOverlayPosition, data["position"], "position")
    if "horizontal_offset" in data:
        overlay.horizontal_offset = _number(int, data["horizontal_offset"], "horizontal_offset")
    if "vertical_offset" in data:
        overlay.vertical_offset = _number(int, data["vertical_offset"], "vertical_offset")
    if "font_name" in data:
        overlay.font_name = str(data["font_name"])
    if "font_size" in data:
        overlay.font_size = _number(float, data["font_size"], "font_size")
    if "font_style" in data:
        overlay.font_style = parse_flags(FontStyle, data["font_style"], "font_style")
    if "fore_color" in data:
        overlay.fore_color = data["fore_color"]
    if "border_color" in data:
        overlay.border_color = data["border_color"]
    return overlay


def parse_screen(index: int, data: dict, base_dir: Path, detected) -> ScreenRegion:
    _check_keys(data, SCREEN_KEYS, f"screen {index}")
    if "bounds" in data:
        values = data["bounds"]
        if not isinstance(values, (list, tuple)) or len(values) != 4:
            raise InvalidArgumentError(f"bounds of screen {index} must be [x, y, width, height]")
        bounds = Rect(*(_number(int, v, f"bounds of screen {index}") for v in values))
    else:
        bounds = detected(index)

    margins = ScreenMargins()
    if "margins" in data:
        _check_keys(data["margins"], MARGIN_KEYS, f"margins of screen {index}")
        margins = ScreenMargins(**{
            k: _number(int, v, f"margins of screen {index}") for k, v in data["margins"].items()
        })

    static_image = None
    if "static_image" in data:
        static_image = parse_wallpaper(data["static_image"], base_dir)

    return ScreenRegion(
        index, bounds,
        cycle_randomly=bool(data.get("cycle_randomly", True)),
        static_image=static_image,
        margins=margins,
        overlays=[parse_overlay(o) for o in data.get("overlays", [])],
    )


def parse_layout_config(data: dict, base_dir: Path = Path("."),
                        layout: ScreenLayout | None = None) -> LayoutConfig:
    _check_keys(data, TOP_LEVEL_KEYS, "layout")
    measured = None

    def detected(index):
        nonlocal measured
        if measured is None:
            measured = (layout or ScreeninfoScreenLayout()).screen_bounds()
        if index >= len(measured):
            raise InvalidArgumentError(f"Screen {index} is not connected")
        return measured[index]

    config = LayoutConfig()
    if "mode" in data:
        config.mode = str(data["mode"])
    if "dpi" in data:
        config.dpi = _number(float, data["dpi"], "dpi")
    if "wallpaper" in data:
        config.defaults = parse_defaults(data["wallpaper"])

    screens = data.get("screens")
    if screens is None:
        detected(0)
        screens = [{} for _ in measured]
    config.screens = [parse_screen(i, s, base_dir, detected) for i, s in enumerate(screens)]
    return config


def load_layout_config(path, layout: ScreenLayout | None = None) -> LayoutConfig:
    path = Path(path)
    with path.open() as f:
        data = json.load(f)
    return parse_layout_config(data, path.parent, layout)
