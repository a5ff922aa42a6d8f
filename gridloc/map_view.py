"""Geometry behind the map display: grey image, pixel/metric conversion and zoom."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gridloc.grid import OccupancyGrid
from gridloc.transform import Transform

Point = Tuple[float, float]
Segment = Tuple[Point, Point]

UNKNOWN_GRAY = 128
MIN_SCALE = 0.05
MAX_SCALE = 100.0


def occupancy_to_gray(grid: OccupancyGrid) -> List[List[int]]:
    """Render a grid as rows of grey levels, mirrored left to right.

    Unknown cells become 128, free cells 255 and fully occupied cells 0;
    values above 100 count as 100.
    """
    rows: List[List[int]] = []
    width = grid.width
    for y in range(grid.height):
        row = grid.data[y * width:(y + 1) * width]
        gray = [
            UNKNOWN_GRAY if value < 0 else 255 - min(value, 100) * 255 // 100
            for value in row
        ]
        gray.reverse()
        rows.append(gray)
    return rows


def arrow_segments(
    x: float, y: float, yaw: float, length: float, angle: float
) -> List[Segment]:
    """Three metric segments drawing an arrow: the shaft and its two barbs."""
    tip = (x + length * math.cos(yaw), y + length * math.sin(yaw))
    left = (
        x + length * math.cos(yaw + angle) * 3 / 4,
        y + length * math.sin(yaw + angle) * 3 / 4,
    )
    right = (
        x + length * math.cos(yaw - angle) * 3 / 4,
        y + length * math.sin(yaw - angle) * 3 / 4,
    )
    return [((x, y), tip), (tip, left), (tip, right)]


class MapDisplay:
    """Converts between metric map positions and pixels of the displayed map."""

    def __init__(self) -> None:
        self.grid: Optional[OccupancyGrid] = None
        self.image: List[List[int]] = []
        self.scale = 1.0
        self.offset_x = 0
        self.offset_y = 0

    def set_map(self, grid: OccupancyGrid) -> None:
        """Use a new map and render its grey image."""
        self.grid = grid
        self.image = occupancy_to_gray(grid)

    def set_display_parameter(self, scale: float, offset_x: int, offset_y: int) -> None:
        """Set the zoom factor and the pixel offset of the map's top left corner."""
        self.scale = scale
        self.offset_x = offset_x
        self.offset_y = offset_y

    def map_transform(self) -> Transform:
        """Pose of the map origin in the map frame; identity without a map."""
        if self.grid is None:
            return Transform()
        return self.grid.info.origin

    def to_display(self, metric_x: float, metric_y: float) -> Tuple[int, int]:
        """Pixel position of a metric point; ``(0, 0)`` while no map is set."""
        if self.grid is None:
            return (0, 0)
        local = self.map_transform().inverse() * Transform((metric_x, metric_y, 0.0))
        mx, my = local.translation[0], local.translation[1]
        info = self.grid.info
        return (
            int(self.offset_x - mx * self.scale / info.resolution + info.width * self.scale),
            int(self.offset_y + my * self.scale / info.resolution),
        )

    def to_map(self, pixel_x: float, pixel_y: float) -> Point:
        """Metric position of a pixel; raises RuntimeError while no map is set."""
        if self.grid is None:
            raise RuntimeError("no map has been set")
        info = self.grid.info
        mx = -(pixel_x - self.offset_x - info.width * self.scale) * info.resolution / self.scale
        my = (pixel_y - self.offset_y) * info.resolution / self.scale
        placed = self.map_transform() * Transform((mx, my, 0.0))
        return (placed.translation[0], placed.translation[1])


@dataclass
class ZoomState:
    """Zoom factor of an image of ``width`` by ``height`` pixels."""

    width: int
    height: int
    scale: float = 1.0
    scale_step: float = 0.1
    _unused: None = field(default=None, repr=False, compare=False)

    def set_scale(self, scale: float) -> float:
        """Change the zoom; factors at or below 0.05 are ignored, large ones capped at 100."""
        if scale != self.scale and scale > MIN_SCALE:
            self.scale = min(scale, MAX_SCALE)
        return self.scale

    def zoom_in(self) -> float:
        return self.set_scale(self.scale + self.scale_step)

    def zoom_out(self) -> float:
        return self.set_scale(self.scale - self.scale_step)

    def zoom_reset(self) -> float:
        return self.set_scale(1.0)

    def scaled_size(self) -> Tuple[int, int]:
        """Size in pixels of the image at the current zoom."""
        return (int(self.width * self.scale), int(self.height * self.scale))

    def offset(self, window_width: int, window_height: int) -> Tuple[int, int]:
        """Top left corner that centres the scaled image in a window, never negative."""
        scaled_w, scaled_h = self.scaled_size()
        return (
            max(0, window_width // 2 - scaled_w // 2),
            max(0, window_height // 2 - scaled_h // 2),
        )