"""
Wallpaper and text overlay records consumed by the compositor.

These are plain value objects: the caller fills them in (from a layout file,
a UI, ...) and hands them to a build. Nothing here touches the disk except
`WallpaperSpec.image_exists`.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, time
from pathlib import Path


class InvalidArgumentError(ValueError):
    """Raised for null/empty source lists and undefined enum values."""


class Placement(enum.IntEnum):
    UNIFORM = 0
    UNIFORM_TO_FILL = 1
    STRETCH = 2
    CENTER = 3
    TILE = 4


class WallpaperEffects(enum.IntFlag):
    NONE = 0
    FLIP_HORIZONTAL = 1
    FLIP_VERTICAL = 2
    MIRROR_RIGHT = 4
    MIRROR_LEFT = 8
    MIRROR_TOP = 16
    MIRROR_BOTTOM = 32


ALL_EFFECTS = (
    WallpaperEffects.FLIP_HORIZONTAL | WallpaperEffects.FLIP_VERTICAL
    | WallpaperEffects.MIRROR_RIGHT | WallpaperEffects.MIRROR_LEFT
    | WallpaperEffects.MIRROR_TOP | WallpaperEffects.MIRROR_BOTTOM
)


class TextOverlayPosition(enum.IntEnum):
    TOP_LEFT = 0
    TOP_MIDDLE = 1
    TOP_RIGHT = 2
    BOTTOM_LEFT = 3
    BOTTOM_MIDDLE = 4
    BOTTOM_RIGHT = 5


class FontStyle(enum.IntFlag):
    REGULAR = 0
    BOLD = 1
    ITALIC = 2


DEFAULT_BACKGROUND = "black"
DEFAULT_CYCLE_START = time(0, 0, 0)
DEFAULT_CYCLE_STOP = time(23, 59, 59)


@dataclass
class WallpaperSpec:
    """One image (or just a background color) and how to place it."""

    image_path: Path | None = None
    placement: Placement = Placement.UNIFORM
    offset: tuple[int, int] = (0, 0)
    # Percentage deltas from 100, so (0, 0) means unscaled.
    scale: tuple[int, int] = (0, 0)
    effects: WallpaperEffects = WallpaperEffects.NONE
    background_color: str | tuple = DEFAULT_BACKGROUND
    only_cycle_between_start: time = DEFAULT_CYCLE_START
    only_cycle_between_stop: time = DEFAULT_CYCLE_STOP

    def __post_init__(self):
        if self.image_path is not None and not isinstance(self.image_path, Path):
            self.image_path = Path(self.image_path)

    def image_exists(self) -> bool:
        return self.image_path is not None and self.image_path.is_file()

    def evaluate_cycle_conditions(self, now: datetime | None = None) -> bool:
        """True if the current time of day lies inside the cycle window."""
        if now is None:
            now = datetime.now()
        return self.only_cycle_between_start <= now.time() <= self.only_cycle_between_stop


@dataclass
class TextOverlaySpec:
    format: str = "%WALLPAPER1%"
    position: TextOverlayPosition = TextOverlayPosition.BOTTOM_RIGHT
    horizontal_offset: int = 0
    vertical_offset: int = 0
    font_name: str = "Verdana"
    font_size: float = 12
    font_style: FontStyle = FontStyle.REGULAR
    fore_color: str | tuple = "white"
    border_color: str | tuple = "black"


@dataclass
class WallpaperSpecDefaults:
    """Settings applied to cycling sources that only name an image file."""

    placement: Placement = Placement.UNIFORM_TO_FILL
    offset: tuple[int, int] = (0, 0)
    scale: tuple[int, int] = (0, 0)
    effects: WallpaperEffects = WallpaperEffects.NONE
    background_color: str | tuple = DEFAULT_BACKGROUND

    def spec_for(self, image_path) -> WallpaperSpec:
        return WallpaperSpec(
            image_path=image_path,
            placement=self.placement,
            offset=self.offset,
            scale=self.scale,
            effects=self.effects,
            background_color=self.background_color,
        )
