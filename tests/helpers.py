RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def colors(image, box=None):
    """Set of distinct colors in `image` (optionally a crop of it)."""
    if box is not None:
        image = image.crop(box)
    return {color for _, color in image.getcolors(maxcolors=image.width * image.height)}


def is_reddish(pixel):
    return pixel[0] > 200 and pixel[1] < 50 and pixel[2] < 50
