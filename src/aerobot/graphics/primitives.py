"""Drawing primitives for numpy RGB frame buffers.

Buffers are ``(height, width, 3)`` uint8 arrays. Shapes accept float
coordinates and are clipped to the buffer; every filled shape takes an
optional ``alpha`` for blending over what is already drawn.
"""

import math
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Point = Tuple[float, float]
Buffer = NDArray[np.uint8]


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def _blend(region: Buffer, mask: NDArray[np.bool_], color: Color, alpha: float) -> None:
    """Paint ``color`` into ``region`` where ``mask`` is set."""
    if alpha >= 1.0:
        region[mask] = color
        return
    if alpha <= 0.0:
        return
    src = np.asarray(color, dtype=np.float32)
    dst = region[mask].astype(np.float32)
    region[mask] = (src * alpha + dst * (1.0 - alpha)).astype(np.uint8)


def _bounds(buffer: Buffer, x1: float, y1: float, x2: float, y2: float) -> Tuple[int, int, int, int]:
    """Integer pixel bounds of a box, clipped to the buffer."""
    h, w = buffer.shape[:2]
    return (
        max(0, min(int(math.floor(x1)), w)),
        max(0, min(int(math.floor(y1)), h)),
        max(0, min(int(math.ceil(x2)), w)),
        max(0, min(int(math.ceil(y2)), h)),
    )


def draw_rect(
    buffer: Buffer,
    x: float,
    y: float,
    width: float,
    height: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw an axis-aligned filled rectangle.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        alpha: Opacity from 0.0 to 1.0
    """
    x1, y1, x2, y2 = _bounds(buffer, x, y, x + width, y + height)
    if x2 <= x1 or y2 <= y1:
        return
    region = buffer[y1:y2, x1:x2]
    _blend(region, np.ones(region.shape[:2], dtype=bool), color, alpha)


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a filled circle."""
    if radius <= 0:
        return
    x1, y1, x2, y2 = _bounds(buffer, cx - radius, cy - radius, cx + radius + 1, cy + radius + 1)
    if x2 <= x1 or y2 <= y1:
        return

    ys, xs = np.ogrid[y1:y2, x1:x2]
    mask = (xs + 0.5 - cx) ** 2 + (ys + 0.5 - cy) ** 2 <= radius ** 2
    _blend(buffer[y1:y2, x1:x2], mask, color, alpha)


def draw_ellipse(
    buffer: Buffer,
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a filled axis-aligned ellipse."""
    if rx <= 0 or ry <= 0:
        return
    x1, y1, x2, y2 = _bounds(buffer, cx - rx, cy - ry, cx + rx + 1, cy + ry + 1)
    if x2 <= x1 or y2 <= y1:
        return

    ys, xs = np.ogrid[y1:y2, x1:x2]
    mask = ((xs + 0.5 - cx) / rx) ** 2 + ((ys + 0.5 - cy) / ry) ** 2 <= 1.0
    _blend(buffer[y1:y2, x1:x2], mask, color, alpha)


def fill_polygon(
    buffer: Buffer,
    points: Sequence[Point],
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Fill a polygon using the even-odd rule on pixel centres."""
    if len(points) < 3:
        return
    xs_p = [p[0] for p in points]
    ys_p = [p[1] for p in points]
    x1, y1, x2, y2 = _bounds(buffer, min(xs_p), min(ys_p), max(xs_p) + 1, max(ys_p) + 1)
    if x2 <= x1 or y2 <= y1:
        return

    ys, xs = np.mgrid[y1:y2, x1:x2]
    px = xs + 0.5
    py = ys + 0.5
    inside = np.zeros(px.shape, dtype=bool)

    n = len(points)
    for i in range(n):
        ax, ay = points[i]
        bx, by = points[(i + 1) % n]
        if ay == by:
            continue
        crosses = (ay > py) != (by > py)
        x_at = ax + (py - ay) * (bx - ax) / (by - ay)
        inside ^= crosses & (px < x_at)

    _blend(buffer[y1:y2, x1:x2], inside, color, alpha)


def rotated_rect_points(cx: float, cy: float, width: float, height: float, angle: float) -> list[Point]:
    """Corner points of a rectangle centred on (cx, cy) rotated by ``angle`` radians."""
    c, s = math.cos(angle), math.sin(angle)
    hw, hh = width / 2, height / 2
    corners = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]
    return [(cx + x * c - y * s, cy + x * s + y * c) for x, y in corners]


def draw_line(
    buffer: Buffer,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    color: Color,
    thickness: int = 1,
) -> None:
    """Draw a line using Bresenham's algorithm.

    Args:
        buffer: Target numpy array (height, width, 3)
        x1, y1: Start point
        x2, y2: End point
        color: RGB color tuple
        thickness: Line thickness in pixels
    """
    h, w = buffer.shape[:2]

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    x, y = x1, y1

    while True:
        for tx in range(-thickness // 2, (thickness + 1) // 2):
            for ty in range(-thickness // 2, (thickness + 1) // 2):
                px, py = x + tx, y + ty
                if 0 <= px < w and 0 <= py < h:
                    buffer[py, px] = color

        if x == x2 and y == y2:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
