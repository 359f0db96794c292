"""
Draw one wallpaper into one destination rectangle.

The background color is always painted first. Then, if the image file
exists, the image is loaded, optionally expanded with mirror/flip effects,
and placed according to the wallpaper's placement mode, honoring its scale
and offset.
"""

import logging

from PIL import Image

from draw_context import DrawContext
from geometry import Rect
from wallpaper_specs import (
    ALL_EFFECTS, InvalidArgumentError, Placement, WallpaperEffects, WallpaperSpec,
)

log = logging.getLogger(__name__)


def effect_layout(effects: WallpaperEffects, width: int, height: int):
    """
    Work out how mirror/flip effects expand an image of the given size.

    Returns (horizontal_images, vertical_images, horizontal_anchor,
    vertical_anchor). The anchors say where the tiling pattern starts: 0 means
    the first copy is the unmirrored image, a full image width/height means
    the first copy is the mirrored one. Mirror flags are evaluated before the
    flip flags, and a flip toggles whatever anchor the mirrors chose.
    """
    horizontal_images = 1
    vertical_images = 1
    horizontal_anchor = 0
    vertical_anchor = 0

    if effects & WallpaperEffects.MIRROR_LEFT:
        horizontal_images += 1
        horizontal_anchor = width
    if effects & WallpaperEffects.MIRROR_RIGHT:
        horizontal_images += 1
        if not effects & WallpaperEffects.MIRROR_LEFT:
            horizontal_anchor = 0
    if effects & WallpaperEffects.FLIP_HORIZONTAL:
        horizontal_anchor = width if horizontal_anchor == 0 else 0

    if effects & WallpaperEffects.MIRROR_TOP:
        vertical_images += 1
        vertical_anchor = height
    if effects & WallpaperEffects.MIRROR_BOTTOM:
        vertical_images += 1
        if not effects & WallpaperEffects.MIRROR_TOP:
            vertical_anchor = 0
    if effects & WallpaperEffects.FLIP_VERTICAL:
        vertical_anchor = height if vertical_anchor == 0 else 0

    return horizontal_images, vertical_images, horizontal_anchor, vertical_anchor


def synthesize_effects(image: Image.Image, effects: WallpaperEffects) -> Image.Image:
    """
    Build a new image tiling `image` with every other copy mirrored.

    Copy (column, row) is flipped horizontally when its tile index (column
    minus the anchor shift) is odd, and vertically likewise, so neighbouring
    copies always meet at a mirror seam.
    """
    width, height = image.size
    columns, rows, h_anchor, v_anchor = effect_layout(effects, width, height)
    h_shift = 1 if h_anchor else 0
    v_shift = 1 if v_anchor else 0

    variants = {}
    result = Image.new(image.mode, (width * columns, height * rows))
    for row in range(rows):
        for column in range(columns):
            flip_x = (column - h_shift) % 2 == 1
            flip_y = (row - v_shift) % 2 == 1
            if (flip_x, flip_y) not in variants:
                tile = image
                if flip_x:
                    tile = tile.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
                if flip_y:
                    tile = tile.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
                variants[(flip_x, flip_y)] = tile
            result.paste(variants[(flip_x, flip_y)], (column * width, row * height))
    return result


def _load_image(path) -> Image.Image:
    with Image.open(path) as source:
        source.load()
        has_alpha = source.mode in ("RGBA", "LA", "PA") or "transparency" in source.info
        return source.convert("RGBA" if has_alpha else "RGB")


class PlacementRenderer:
    def draw(self, context: DrawContext, dest: Rect, spec: WallpaperSpec) -> None:
        try:
            placement = Placement(spec.placement)
        except ValueError:
            raise InvalidArgumentError(f"Undefined placement value: {spec.placement!r}") from None
        raw_effects = int(spec.effects)
        if raw_effects < 0 or raw_effects & ~int(ALL_EFFECTS):
            raise InvalidArgumentError(f"Undefined effects value: {raw_effects!r}")
        effects = WallpaperEffects(raw_effects)

        context.fill_rect(dest, spec.background_color)

        if not spec.image_exists():
            if spec.image_path is not None:
                log.warning("Image %s does not exist, drawing background only", spec.image_path)
            return

        original = _load_image(spec.image_path)
        image = original
        try:
            if effects:
                image = synthesize_effects(original, effects)
            self._place(context, dest, spec, placement, image)
        finally:
            if image is not original:
                image.close()
            original.close()

    def _place(self, context, dest, spec, placement, image):
        scale_x = (spec.scale[0] + 100) / 100
        scale_y = (spec.scale[1] + 100) / 100
        center_x = dest.x + dest.width / 2
        center_y = dest.y + dest.height / 2

        # Scale around the center of the destination, then apply the offset.
        transform = (
            context.transform
            .translated(center_x, center_y)
            .scaled(scale_x, scale_y)
            .translated(-center_x, -center_y)
            .translated(spec.offset[0], spec.offset[1])
        )

        log.debug("Placing %s (%dx%d) into %s as %s", spec.image_path,
                  image.width, image.height, dest, placement.name)
        with context.transformed(transform):
            if placement == Placement.UNIFORM:
                context.draw_image(image, dest.uniform(image.width, image.height))
            elif placement == Placement.UNIFORM_TO_FILL:
                context.draw_image(image, dest.uniform_to_fill(image.width, image.height))
            elif placement == Placement.STRETCH:
                context.draw_image(image, dest)
            elif placement == Placement.CENTER:
                context.draw_image(image, dest.center(image.width, image.height))
            elif placement == Placement.TILE:
                with context.transformed(context.transform.scaled(scale_x, scale_y)):
                    draw_tiled(context, image, dest)


def draw_tiled(context: DrawContext, image: Image.Image, dest: Rect) -> None:
    """Repeat `image` at its native size across `dest`, starting at its origin."""
    width, height = image.size
    for x in range(dest.left, dest.right, width):
        for y in range(dest.top, dest.bottom, height):
            context.draw_image(image, Rect(x, y, width, height))
