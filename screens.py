"""
Screen layout providers and per-screen compositor settings.

A `ScreenLayout` answers one question: where are the physical screens? The
compositor never asks the windowing system itself; it only reads the bounds
cached on each `ScreenRegion`, which the caller refreshes when the display
configuration changes.
"""

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from screeninfo import get_monitors

from geometry import Rect, union_all
from wallpaper_specs import TextOverlaySpec, WallpaperSpec

log = logging.getLogger(__name__)


class ScreenLayout(Protocol):
    def screen_bounds(self) -> list[Rect]:
        """Physical screen rectangles, ordered by screen index."""
        ...


class StaticScreenLayout:
    """Fixed list of rectangles, e.g. from a layout file or a test."""

    def __init__(self, bounds: Sequence[Rect]):
        self._bounds = list(bounds)

    def screen_bounds(self) -> list[Rect]:
        return list(self._bounds)


def primary_relative(monitors) -> list[Rect]:
    """
    Rectangles of screeninfo monitors, shifted so the primary monitor sits at
    (0, 0) and monitors left of or above it get negative coordinates. Without
    a primary flag the first monitor is the origin.
    """
    if not monitors:
        return []
    primary = next((m for m in monitors if m.is_primary), monitors[0])
    return [
        Rect(m.x - primary.x, m.y - primary.y, m.width, m.height)
        for m in monitors
    ]


class ScreeninfoScreenLayout:
    """Reads the current monitor arrangement through screeninfo."""

    def screen_bounds(self) -> list[Rect]:
        bounds = primary_relative(get_monitors())
        log.debug("screeninfo reported %d monitor(s): %s", len(bounds), bounds)
        return bounds


@dataclass
class ScreenMargins:
    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0


class ScreenRegion:
    """Compositor settings for one physical screen."""

    def __init__(self, index: int, bounds: Rect = Rect(0, 0, 0, 0), *,
                 cycle_randomly: bool = True,
                 static_image: WallpaperSpec | None = None,
                 margins: ScreenMargins | None = None,
                 overlays: list[TextOverlaySpec] | None = None):
        self._index = index
        self.bounds = bounds
        self.cycle_randomly = cycle_randomly
        self.static_image = static_image if static_image is not None else WallpaperSpec()
        self.margins = margins if margins is not None else ScreenMargins()
        self.overlays = overlays if overlays is not None else []

    @property
    def index(self) -> int:
        return self._index

    @property
    def bounds_with_margin(self) -> Rect:
        # Not clamped: huge margins yield a negative width/height.
        m = self.margins
        return Rect(
            self.bounds.x + m.left,
            self.bounds.y + m.top,
            self.bounds.width - m.right - m.left,
            self.bounds.height - m.bottom - m.top,
        )

    def refresh_bounds(self, layout: ScreenLayout) -> None:
        self.bounds = layout.screen_bounds()[self._index]

    def is_eligible(self, now=None) -> bool:
        """True if this screen takes a cycling source instead of its static image."""
        return self.cycle_randomly or not self.static_image.evaluate_cycle_conditions(now)

    def __repr__(self):
        return (f"ScreenRegion(index={self._index}, bounds={self.bounds}, "
                f"cycle_randomly={self.cycle_randomly}, margins={self.margins})")


def regions_from_layout(layout: ScreenLayout) -> list[ScreenRegion]:
    """One default ScreenRegion per screen currently reported by the layout."""
    return [ScreenRegion(i, bounds) for i, bounds in enumerate(layout.screen_bounds())]


def virtual_bounds(regions: Sequence[ScreenRegion]) -> Rect:
    """Union of all screen bounds; may have a negative origin."""
    bounds = union_all(region.bounds for region in regions)
    if bounds is None:
        return Rect(0, 0, 0, 0)
    return bounds
