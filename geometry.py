"""
Integer rectangle math shared by the wallpaper compositor.

Rectangles follow screen conventions: (x, y) is the top-left corner, the
right and bottom edges are exclusive, and width/height may be negative when
margins eat more than the whole screen.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def offset(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def union(self, other: "Rect") -> "Rect":
        left = min(self.left, other.left)
        top = min(self.top, other.top)
        right = max(self.right, other.right)
        bottom = max(self.bottom, other.bottom)
        return Rect(left, top, right - left, bottom - top)

    def scale_full(self, factor: float) -> "Rect":
        """Scale position and size, truncating toward zero."""
        return Rect(
            int(self.x * factor), int(self.y * factor),
            int(self.width * factor), int(self.height * factor),
        )

    def center(self, content_width: int, content_height: int) -> "Rect":
        """Rectangle of the given content size centered in this one."""
        return Rect(
            self.x + (_half(self.width) - _half(content_width)),
            self.y + (_half(self.height) - _half(content_height)),
            content_width,
            content_height,
        )

    def uniform(self, content_width: int, content_height: int) -> "Rect":
        """Largest centered rect with the content's aspect ratio that fits inside."""
        return self._uniform(content_width, content_height, to_fill=False)

    def uniform_to_fill(self, content_width: int, content_height: int) -> "Rect":
        """Smallest centered rect with the content's aspect ratio that covers this one."""
        return self._uniform(content_width, content_height, to_fill=True)

    def _uniform(self, content_width, content_height, to_fill):
        horizontal = self.width / content_width
        vertical = self.height / content_height
        if to_fill:
            factor = max(horizontal, vertical)
        else:
            factor = min(horizontal, vertical)
        return self.center(int(content_width * factor), int(content_height * factor))


def _half(value: int) -> int:
    # Integer division truncating toward zero, like the screen APIs do.
    return int(value / 2)


def union_all(rects: Iterable[Rect]) -> Rect | None:
    """Bounding rectangle of all given rects, or None if there are none."""
    result = None
    for rect in rects:
        result = rect if result is None else result.union(rect)
    return result
