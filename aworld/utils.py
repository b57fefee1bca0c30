"""Names, coloured logging and small geometry helpers."""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass

KATAKANAS = (
    "アイウエオカキクケコサシスセソタチツテトナニヌネノハヒフヘホマミムメモヤユヨラリルレロワヲン"
)


def generate_random_name(length: int = 0) -> str:
    """Return a name of distinct katakana; a length of 0 picks 2 to 7 characters."""
    if length == 0:
        length = random.randint(2, 7)
    return "".join(random.sample(KATAKANAS, min(length, len(KATAKANAS))))


def log(tag: str, message: str = "") -> None:
    """Write a green, tagged line to standard error."""
    sys.stderr.write(f"\x1b[1;32m[{str(tag):<7}]\x1b[0;32m {message}\x1b[0m\n")


def debug(message: str = "") -> None:
    """Write a yellow debug line to standard error."""
    sys.stderr.write(f"\x1b[1;33m[DEBUG  ]\x1b[0;33m {message}\x1b[0m\n")


def error(message: str = "") -> None:
    """Write a red error line to standard error."""
    sys.stderr.write(f"\x1b[1;31m[ERROR  ]\x1b[0;31m {message}\x1b[0m\n")


@dataclass(frozen=True)
class Vec2D:
    """A two-dimensional vector."""

    x: float
    y: float

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normal(self) -> Vec2D:
        size = self.length()
        return Vec2D(self.x / size, self.y / size)

    def inner(self, other: Vec2D) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vec2D) -> float:
        return self.x * other.y - other.x * self.y

    def __sub__(self, other: Vec2D) -> Vec2D:
        """Return the vector pointing from self towards other."""
        return Vec2D(other.x - self.x, other.y - self.y)


def intersects_circle(
    x0: float, y0: float, r0: float, x1: float, y1: float, r1: float
) -> bool:
    """Tell whether two circles overlap."""
    return math.hypot(x0 - x1, y0 - y1) < r0 + r1


def intersects_circle_with_line(
    x0: float, y0: float, r0: float, x1: float, y1: float, x2: float, y2: float
) -> float | None:
    """Measure how far the segment (x1, y1)-(x2, y2) reaches into the circle.

    Returns None when the segment misses the circle of radius r0 at (x0, y0).
    """
    p = Vec2D(x0, y0)
    a = Vec2D(x1, y1)
    b = Vec2D(x2, y2)

    v_ab = b - a
    v_ap = p - a
    n1 = v_ab.inner(v_ap)

    if n1 < 0.0:
        return v_ap.length() - r0 if v_ap.length() < r0 else None

    n2 = v_ab.inner(v_ab)
    r_sq = r0 * r0
    if n1 > n2:
        dist_sq = (p - b).length() ** 2
        return r_sq - dist_sq if dist_sq < r_sq else None

    n3 = v_ap.inner(v_ap)
    dist_sq = n3 - (n1 / n2) * n1
    return r_sq - dist_sq if dist_sq < r_sq else None