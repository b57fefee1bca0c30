"""Terrain grids: random generation, encoding and placement."""

from __future__ import annotations

import base64
import enum
import random
from dataclasses import dataclass, field
from typing import Union

from aworld.counter import get_count
from aworld.field import Field
from aworld.models import ObjectId

_MAGNIFICATION = 2


class TerrainInfo(enum.IntEnum):
    """What a terrain cell holds."""

    FLOOR = 0
    WALL = 1


Obstacle = Union[ObjectId, TerrainInfo]


@dataclass
class Terrain:
    """A stored terrain: its cells are base64 encoded in ``content``."""

    id: int
    content: str
    width: int
    height: int


def _encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _coarse_grid(width_: int, height_: int) -> list[int]:
    """Grow land on a grid of reduced size, each cell leaning on its neighbours."""
    raw_: list[int] = []
    for i in range(width_ * height_):
        rate = 0.1
        top_edge = i < width_
        left_edge = (i + 1) % width_ == 1
        right_edge = (i + 1) % width_ == 0

        if not top_edge and not left_edge and raw_[i - width_ - 1] == 1:
            rate += 0.15
        if not top_edge and raw_[i - width_] == 1:
            rate += 0.25
        if not top_edge and not right_edge and raw_[i - width_ + 1] == 1:
            rate += 0.15
        if not left_edge and raw_[i - 1] == 1:
            rate += 0.25

        raw_.append(1 if random.random() < rate else 0)
    return raw_


def _smooth(raw: list[int], width: int, height: int) -> None:
    """Flip cells that disagree with many neighbours or lie near the border."""
    size = width * height
    for _ in range(10):
        for j in range(size):
            rate = 0.0
            top_edge = j < width
            left_edge = (j + 1) % width == 1
            right_edge = (j + 1) % width == 0
            bottom_edge = j >= size - width
            if top_edge:
                rate += 0.3
            if left_edge:
                rate += 0.1
            if right_edge:
                rate += 0.1
            if bottom_edge:
                rate += 0.3

            cell = raw[j]
            neighbours = (
                (not top_edge and not left_edge, j - width - 1),
                (not top_edge, j - width),
                (not top_edge and not right_edge, j - width + 1),
                (not left_edge, j - 1),
                (not right_edge, j + 1),
                (not bottom_edge and not left_edge, j + width - 1),
                (not bottom_edge, j + width),
                (not bottom_edge and not right_edge, j + width + 1),
            )
            for present, index in neighbours:
                if present and raw[index] != cell:
                    rate += 0.1

            if rate > 0.4:
                raw[j] = 0 if cell == 1 else 1


def generate_terrain(width: int, height: int) -> bytes:
    """Generate ``width * height`` cells of floor (0) and wall (1), row by row."""
    width_ = width // _MAGNIFICATION
    height_ = height // _MAGNIFICATION
    raw_ = _coarse_grid(width_, height_)

    raw: list[int] = []
    for h in range(1, height_ + 1):
        for _ in range(_MAGNIFICATION):
            for w in range(1, width_ + 1):
                cell = raw_[h * w - 1]
                raw.extend((cell, cell))
            if width % 2 == 1:
                raw.append(random.randint(0, 1))
    if height % 2 == 1:
        raw.extend(random.randint(0, 1) for _ in range(width))

    _smooth(raw, width, height)
    return bytes(raw)


@dataclass
class NewTerrain:
    """A freshly generated terrain, not yet stored."""

    content: str
    width: int
    height: int

    @classmethod
    def with_size(cls, width: int, height: int) -> NewTerrain:
        return cls(_encode(generate_terrain(width, height)), width, height)

    @classmethod
    def random(cls) -> NewTerrain:
        """Generate a terrain between 40 and 80 cells on each side."""
        width = random.randint(40, 80)
        height = random.randint(40, 80)
        return cls.with_size(width, height)


@dataclass(eq=False)
class TerrainLocal:
    """The terrain of a running world."""

    entity_id: int
    model: Terrain
    raw: Field[list]
    object_ids: Field[list] = field(default_factory=lambda: Field([]))

    @classmethod
    def from_model(cls, model: Terrain) -> TerrainLocal:
        """Decode a stored terrain; raises ValueError on malformed content."""
        raw = base64.b64decode(model.content, validate=True)
        return cls(entity_id=get_count(), model=model, raw=Field(list(raw)))

    def randpos(self) -> tuple[float, float]:
        """Pick a random floor position, or (0, 0) after 20 failed tries."""
        width = self.model.width
        height = self.model.height
        for _ in range(20):
            x = random.random() * width
            y = random.random() * height
            raw = self.raw.read()
            if raw[int(x) + int(y) * height] == TerrainInfo.FLOOR:
                return x, y
        return 0.0, 0.0