"""
Pre-wrap a composite for desktops that tile from the primary screen's origin.

Some desktops (Windows in particular) ignore that the virtual desktop may
extend left of or above the primary screen: they put the top-left pixel of
the wallpaper at the primary screen's origin and tile from there. Rotating
the image by the negative extent of the desktop makes the tiled result line
up with the real screens again.

Only one rotation per axis is performed and both read from the unfixed
composite, so a layout with screens both left of and above the primary
screen (2x2 grids and larger) is not fully corrected.
"""

import logging

from PIL import Image

from geometry import Rect

log = logging.getLogger(__name__)


def rotate_horizontal(image: Image.Image, shift: int) -> Image.Image:
    """Move the leftmost `shift` columns to the right edge, losslessly."""
    width, height = image.size
    shift %= width or 1
    if shift == 0:
        return image.copy()
    result = Image.new(image.mode, image.size)
    result.paste(image.crop((shift, 0, width, height)), (0, 0))
    result.paste(image.crop((0, 0, shift, height)), (width - shift, 0))
    return result


def rotate_vertical(image: Image.Image, shift: int) -> Image.Image:
    """Move the topmost `shift` rows to the bottom edge, losslessly."""
    width, height = image.size
    shift %= height or 1
    if shift == 0:
        return image.copy()
    result = Image.new(image.mode, image.size)
    result.paste(image.crop((0, shift, width, height)), (0, 0))
    result.paste(image.crop((0, 0, width, shift)), (0, height - shift))
    return result


class CanvasFixer:
    def __init__(self, virtual_bounds: Rect):
        self.virtual_bounds = virtual_bounds

    def fix(self, source: Image.Image) -> Image.Image:
        """Return the wrapped version of `source`, same size and mode."""
        bounds = self.virtual_bounds
        scale_factor = source.width / bounds.width
        scaled = bounds.scale_full(scale_factor)
        fixed = None

        if bounds.left < 0:
            log.debug("Rotating composite left by %d px", abs(scaled.left))
            fixed = rotate_horizontal(source, abs(scaled.left))

        if bounds.top < 0:
            log.debug("Rotating composite up by %d px", abs(scaled.top))
            if fixed is not None:
                fixed.close()
            fixed = rotate_vertical(source, abs(scaled.top))

        if fixed is None:
            fixed = source.copy()
        return fixed
