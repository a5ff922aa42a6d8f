"""Occupancy grids and laser scans."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from gridloc.transform import Transform

UNKNOWN = -1


@dataclass
class MapInfo:
    """Size, cell size in metres and pose of the grid's corner cell."""

    width: int
    height: int
    resolution: float
    origin: Transform = field(default_factory=Transform)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("grid dimensions cannot be negative")


@dataclass
class OccupancyGrid:
    """Row-major grid of occupancy values: -1 unknown, 0 free to 100 occupied."""

    info: MapInfo
    data: List[int]
    frame_id: str = ""

    def __post_init__(self) -> None:
        if len(self.data) != self.info.width * self.info.height:
            raise ValueError("data length does not match width * height")

    @classmethod
    def blank(cls, width: int, height: int, resolution: float) -> "OccupancyGrid":
        """An all-unknown grid centred on the world origin."""
        origin = Transform(
            (-resolution * width / 2.0, -resolution * height / 2.0, 0.0)
        )
        info = MapInfo(width, height, resolution, origin)
        return cls(info, [UNKNOWN] * (width * height))

    @property
    def width(self) -> int:
        return self.info.width

    @property
    def height(self) -> int:
        return self.info.height

    @property
    def resolution(self) -> float:
        return self.info.resolution

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.info.width and 0 <= y < self.info.height

    def index(self, x: int, y: int) -> int:
        """Position of cell ``(x, y)`` in ``data``."""
        if not self.contains(x, y):
            raise IndexError(f"cell ({x}, {y}) lies outside the grid")
        return x + y * self.info.width

    def get(self, x: int, y: int) -> int:
        return self.data[self.index(x, y)]

    def set(self, x: int, y: int, value: int) -> None:
        value = int(value)
        if not -128 <= value <= 127:
            raise ValueError(f"occupancy value {value} does not fit in a signed byte")
        self.data[self.index(x, y)] = value


@dataclass
class LaserScan:
    """A planar range scan; beam ``i`` points at ``angle_min + i * angle_increment``."""

    angle_min: float
    angle_max: float
    angle_increment: float
    range_min: float
    range_max: float
    ranges: Sequence[float]
    frame_id: str = ""

    def __post_init__(self) -> None:
        if self.angle_increment <= 0:
            raise ValueError("angle_increment must be positive")

    def beams(self) -> Iterator[Tuple[int, float, float]]:
        """Yield ``(index, angle, range)`` for each beam whose angle is below ``angle_max``."""
        for i, distance in enumerate(self.ranges):
            angle = self.angle_min + i * self.angle_increment
            if angle >= self.angle_max:
                return
            yield i, angle, distance