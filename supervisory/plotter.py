"""Map time series onto line segments in pixel coordinates."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

Point = tuple[float, float]
Segment = tuple[int, int, int, int]


def plot_segments(
    points: Sequence[Point], width: int, height: int, margin: int = 10
) -> list[Segment]:
    """Return the line segments ``(x1, y1, x2, y2)`` joining consecutive points.

    Time runs left to right and value bottom to top, scaled to fit inside
    ``margin`` pixels from each edge. Fewer than two points give no segments.
    """
    if len(points) < 2:
        return []

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    min_time, max_time = min(xs), max(xs)
    min_value, max_value = min(ys), max(ys)
    time_range = (max_time - min_time) or 1
    value_range = (max_value - min_value) or 1
    plot_width = width - 2 * margin
    plot_height = height - 2 * margin

    def to_pixel(point: Point) -> tuple[int, int]:
        x, y = point
        px = int(margin + ((x - min_time) / time_range) * plot_width)
        py = int((height - margin) - ((y - min_value) / value_range) * plot_height)
        return px, py

    pixels = [to_pixel(p) for p in points]
    return [(*a, *b) for a, b in zip(pixels, pixels[1:])]


class Plotter:
    """A plot area of fixed size holding the points to draw."""

    def __init__(self, width: int, height: int, margin: int = 10) -> None:
        self.width = width
        self.height = height
        self.margin = margin
        self.points: list[Point] = []

    def set_data(self, points: Iterable[Point]) -> None:
        """Replace the points to draw."""
        self.points = [(float(x), float(y)) for x, y in points]

    def segments(self) -> list[Segment]:
        """Return the segments for the current points and size."""
        return plot_segments(self.points, self.width, self.height, self.margin)