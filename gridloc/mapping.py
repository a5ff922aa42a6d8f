"""Reflection mapping by counting laser hits and pass-throughs per cell."""

from __future__ import annotations

import math
from typing import List, Set, Tuple

from gridloc.grid import LaserScan, OccupancyGrid

Cell = Tuple[int, int]


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Cell]:
    """Cells crossed by the segment between two cells, both ends included.

    The cells run in increasing order of the dominant axis, so the list may
    start at either end point.
    """
    steep = abs(y1 - y0) > abs(x1 - x0)
    if steep:
        x0, y0 = y0, x0
        x1, y1 = y1, x1
    if x0 > x1:
        x0, x1 = x1, x0
        y0, y1 = y1, y0

    deltax = x1 - x0
    deltay = abs(y1 - y0)
    error = deltax // 2
    ystep = 1 if y0 < y1 else -1
    y = y0
    result: List[Cell] = []
    for x in range(x0, x1 + 1):
        result.append((y, x) if steep else (x, y))
        error -= deltay
        if error < 0:
            y += ystep
            error += deltax
    return result


class CountingMapper:
    """Builds a reflection map where each cell holds hits / (hits + misses)."""

    def __init__(self, width: int = 1000, height: int = 1000, resolution: float = 0.02) -> None:
        self.grid = OccupancyGrid.blank(width, height, resolution)
        self.hits = [0] * (width * height)
        self.misses = [0] * (width * height)

    def _to_cell(self, x: float, y: float) -> Cell:
        info = self.grid.info
        return (
            int(x / info.resolution + info.width // 2),
            int(y / info.resolution + info.height // 2),
        )

    def integrate_scan(self, scan: LaserScan, x: float, y: float, theta: float) -> None:
        """Count one scan taken from odometry pose ``(x, y, theta)`` and refresh the map."""
        robot = self._to_cell(x, y)
        touched: Set[Cell] = set()

        for _, angle, distance in scan.beams():
            if not scan.range_min < distance < scan.range_max:
                continue
            heading = angle + theta
            hit = self._to_cell(x + distance * math.cos(heading), y + distance * math.sin(heading))
            if self.grid.contains(*hit):
                self.hits[self.grid.index(*hit)] += 1
                touched.add(hit)
            # every cell of the line except its last one counts as a miss
            for cell in bresenham_line(robot[0], robot[1], hit[0], hit[1])[:-1]:
                if self.grid.contains(*cell):
                    self.misses[self.grid.index(*cell)] += 1
                    touched.add(cell)

        for cell in touched:
            index = self.grid.index(*cell)
            total = self.hits[index] + self.misses[index]
            if total:
                self.update_reflection_value(cell[0], cell[1], self.hits[index] / total)

        self.grid.frame_id = "/odom"

    def update_reflection_value(self, x: int, y: int, value: float) -> None:
        """Store a reflection probability in [0, 1] as a percentage."""
        self.grid.set(x, y, int(100 * value))