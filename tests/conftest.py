import pytest
from PIL import Image

from tests.helpers import RED


@pytest.fixture
def make_image(tmp_path):
    """Write a solid (or split left/right) PNG and return its path."""
    counter = iter(range(1000))

    def _make(size, color=RED, right_color=None, name=None, mode="RGB"):
        image = Image.new(mode, size, color)
        if right_color is not None:
            width, height = size
            image.paste(right_color, (width // 2, 0, width, height))
        path = tmp_path / (name or f"image{next(counter)}.png")
        image.save(path)
        return path

    return _make
