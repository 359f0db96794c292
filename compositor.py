"""
Compose one bitmap spanning every screen of a multi-monitor desktop.

The virtual desktop is the union of all screen rectangles and may start left
of or above the primary screen. The composite is drawn onto a canvas of that
size (times a scale factor, for previews) with every screen rectangle shifted
so nothing lands at negative coordinates. If the result is going to be
applied on a desktop that tiles from the primary screen's origin, it is
pre-wrapped by CanvasFixer.

How sources are assigned to screens is decided by a CompositionStrategy:

  span        one image spread over all cycling screens
  all         a different image on every cycling screen
  cloned      the same image repeated on every cycling screen
  one-by-one  like "all", but each build only replaces one screen's image

Screens which are not cycling show their static image instead.
"""

import enum
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Sequence

from PIL import Image

from canvas_fixer import CanvasFixer
from draw_context import DEFAULT_DPI, DrawContext, Transform
from geometry import union_all
from overlay_templates import resolve_overlay_texts
from overlay_text import OverlayTextRenderer
from placement import PlacementRenderer
from screens import ScreenRegion, virtual_bounds
from wallpaper_specs import InvalidArgumentError, WallpaperSpec

log = logging.getLogger(__name__)

CANVAS_MODE = "RGB"
CANVAS_COLOR = "black"


class CompositionMode(str, enum.Enum):
    SPAN = "span"
    ALL = "all"
    CLONED = "cloned"
    ONE_BY_ONE = "one-by-one"


class CompositionStrategy(ABC):
    # True if the cycling screens share one source drawn across their union.
    spans_screens = False

    @abstractmethod
    def required_sources_per_screen(self, screens: Sequence[ScreenRegion],
                                    now: datetime | None = None) -> list[int]:
        """How many cycling sources the caller must supply for each screen."""

    @abstractmethod
    def select_sources(self, screens: Sequence[ScreenRegion],
                       sources: Sequence[WallpaperSpec | None],
                       now: datetime | None = None) -> list[WallpaperSpec | None]:
        """The wallpaper each screen shows, index-aligned with `screens`."""


def _supplied(sources, index):
    if index >= len(sources) or sources[index] is None:
        raise InvalidArgumentError(f"No source supplied for screen {index}")
    return sources[index]


class ReplicateSingleSource(CompositionStrategy):
    spans_screens = True

    def required_sources_per_screen(self, screens, now=None):
        return [1 if screen.is_eligible(now) else 0 for screen in screens]

    def select_sources(self, screens, sources, now=None):
        source = sources[0]
        return [source if screen.is_eligible(now) else screen.static_image for screen in screens]


class PerScreenAssignment(CompositionStrategy):
    def required_sources_per_screen(self, screens, now=None):
        return [1 if screen.is_eligible(now) else 0 for screen in screens]

    def select_sources(self, screens, sources, now=None):
        return [
            _supplied(sources, i) if screen.is_eligible(now) else screen.static_image
            for i, screen in enumerate(screens)
        ]


class PerScreenCloned(CompositionStrategy):
    def _first_eligible(self, screens, now):
        for i, screen in enumerate(screens):
            if screen.is_eligible(now):
                return i
        return None

    def required_sources_per_screen(self, screens, now=None):
        required = [0] * len(screens)
        first = self._first_eligible(screens, now)
        if first is not None:
            required[first] = 1
        return required

    def select_sources(self, screens, sources, now=None):
        first = self._first_eligible(screens, now)
        if first is None:
            return [screen.static_image for screen in screens]
        source = _supplied(sources, first)
        return [source if screen.is_eligible(now) else screen.static_image for screen in screens]


class OneByOneAssignment(CompositionStrategy):
    """
    Replace a single screen's image per build, rotating through the screens.

    The first build (and any build after the number of screens changed)
    fills every screen. Keep the same instance across builds.
    """

    def __init__(self):
        self.last_layout: list[WallpaperSpec] = []
        self.last_changed_index = 0

    def _next_eligible(self, screens, now):
        index = self.last_changed_index + 1
        for _ in range(len(screens)):
            if index >= len(screens):
                index = 0
            if screens[index].is_eligible(now):
                return index
            index += 1
        return None

    def _can_reuse(self, screens):
        return len(self.last_layout) == len(screens)

    def required_sources_per_screen(self, screens, now=None):
        required = [0] * len(screens)
        if self._can_reuse(screens):
            index = self._next_eligible(screens, now)
            if index is not None:
                required[index] = 1
        else:
            for i, screen in enumerate(screens):
                if screen.is_eligible(now):
                    required[i] = 1
        return required

    def select_sources(self, screens, sources, now=None):
        if self._can_reuse(screens):
            index = self._next_eligible(screens, now)
            if index is not None:
                layout = list(self.last_layout)
                layout[index] = _supplied(sources, index)
                for i, screen in enumerate(screens):
                    if not screen.is_eligible(now):
                        layout[i] = screen.static_image
                self.last_layout = layout
                self.last_changed_index = index
                return list(layout)

        self.last_layout = PerScreenAssignment().select_sources(screens, sources, now)
        # The next build starts over at the first screen.
        self.last_changed_index = len(screens) - 1
        return list(self.last_layout)


STRATEGIES = {
    CompositionMode.SPAN: ReplicateSingleSource,
    CompositionMode.ALL: PerScreenAssignment,
    CompositionMode.CLONED: PerScreenCloned,
    CompositionMode.ONE_BY_ONE: OneByOneAssignment,
}


def strategy_for(mode) -> CompositionStrategy:
    """Accept a strategy instance, a CompositionMode or its string value."""
    if isinstance(mode, CompositionStrategy):
        return mode
    try:
        return STRATEGIES[CompositionMode(mode)]()
    except ValueError:
        raise InvalidArgumentError(f"Unknown composition mode: {mode!r}") from None


TextResolver = Callable[[Sequence, Sequence[WallpaperSpec]], Sequence[str | None]]


class Compositor:
    def __init__(self, placement_renderer: PlacementRenderer | None = None,
                 overlay_renderer: OverlayTextRenderer | None = None,
                 text_resolver: TextResolver | None = None,
                 dpi: float = DEFAULT_DPI,
                 clock: Callable[[], datetime] = datetime.now):
        self.placement_renderer = placement_renderer or PlacementRenderer()
        self.overlay_renderer = overlay_renderer or OverlayTextRenderer()
        self.text_resolver = text_resolver
        self.dpi = dpi
        self.clock = clock

    def required_sources_per_screen(self, mode, screens: Sequence[ScreenRegion]) -> list[int]:
        return strategy_for(mode).required_sources_per_screen(screens, self.clock())

    def build(self, mode, screens: Sequence[ScreenRegion],
              sources: Sequence[WallpaperSpec | None],
              scale_factor: float = 1.0, use_windows_fix: bool = True) -> Image.Image:
        """
        Compose the wallpaper for `screens` and return it as a new image.

        `sources` are the cycling images requested by
        required_sources_per_screen(); for "span" only the first one is used.
        A scale factor below 1 produces a cheap preview.
        """
        strategy = strategy_for(mode)
        if not sources:
            raise InvalidArgumentError("At least one source wallpaper is required")
        if not screens:
            raise InvalidArgumentError("At least one screen is required")
        if scale_factor <= 0:
            raise InvalidArgumentError(f"Scale factor must be positive, got {scale_factor!r}")

        bounds = virtual_bounds(screens)
        width = int(bounds.width * scale_factor)
        height = int(bounds.height * scale_factor)
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Virtual desktop {bounds} is empty at scale {scale_factor}")

        now = self.clock()
        if strategy.spans_screens and sources[0] is None:
            raise InvalidArgumentError("The source wallpaper must not be None")
        wallpapers = strategy.select_sources(screens, sources, now)
        if any(wallpaper is None for wallpaper in wallpapers):
            raise InvalidArgumentError("Source wallpapers must not contain None")

        # Shift everything so the leftmost/topmost screen starts at 0.
        origin_x = max(0, -bounds.x)
        origin_y = max(0, -bounds.y)
        requires_fix = use_windows_fix and (bounds.left < 0 or bounds.top < 0)
        log.debug("Virtual desktop %s -> canvas %dx%d, fix=%s",
                  bounds, width, height, requires_fix)

        canvas = Image.new(CANVAS_MODE, (width, height), CANVAS_COLOR)
        try:
            context = DrawContext(canvas, self.dpi)
            with context.transformed(Transform(scale_factor, scale_factor)):
                if strategy.spans_screens:
                    self._draw_spanned(context, screens, sources[0], origin_x, origin_y, now)
                else:
                    self._draw_per_screen(context, screens, wallpapers, origin_x, origin_y)

            if requires_fix:
                fixed = CanvasFixer(bounds).fix(canvas)
                canvas.close()
                canvas = fixed
        except BaseException:
            canvas.close()
            raise
        return canvas

    def _resolve_texts(self, overlays, wallpapers):
        if self.text_resolver is not None:
            return self.text_resolver(overlays, wallpapers)
        return resolve_overlay_texts(overlays, wallpapers, self.clock())

    def _draw_spanned(self, context, screens, source, origin_x, origin_y, now):
        eligible = [screen.is_eligible(now) for screen in screens]

        multi_region = union_all(
            screen.bounds_with_margin
            for screen, is_eligible in zip(screens, eligible) if is_eligible
        )
        # None means every screen shows its static image.
        if multi_region is not None:
            multi_region = multi_region.offset(origin_x, origin_y)
            log.debug("Spanning %s across %s", source.image_path, multi_region)
            with context.clipped(multi_region):
                self.placement_renderer.draw(context, multi_region, source)

        for screen, is_eligible in zip(screens, eligible):
            rect = screen.bounds_with_margin.offset(origin_x, origin_y)
            with context.clipped(rect):
                if not is_eligible:
                    log.debug("Screen %d shows its static image", screen.index)
                    self.placement_renderer.draw(context, rect, screen.static_image)
                self._draw_overlays(context, rect, screen, [source])

    def _draw_per_screen(self, context, screens, wallpapers, origin_x, origin_y):
        for screen, wallpaper in zip(screens, wallpapers):
            rect = screen.bounds_with_margin.offset(origin_x, origin_y)
            log.debug("Screen %d: %s into %s", screen.index, wallpaper.image_path, rect)
            with context.clipped(rect):
                self.placement_renderer.draw(context, rect, wallpaper)
                self._draw_overlays(context, rect, screen, wallpapers)

    def _draw_overlays(self, context, rect, screen, wallpapers):
        if not screen.overlays:
            return
        texts = self._resolve_texts(screen.overlays, wallpapers)
        self.overlay_renderer.draw(context, rect, screen.overlays, texts)


def required_sources_per_screen(mode, screens: Sequence[ScreenRegion]) -> list[int]:
    return Compositor().required_sources_per_screen(mode, screens)


def build(mode, screens: Sequence[ScreenRegion], sources: Sequence[WallpaperSpec | None],
          scale_factor: float = 1.0, use_windows_fix: bool = True) -> Image.Image:
    return Compositor().build(mode, screens, sources, scale_factor, use_windows_fix)
