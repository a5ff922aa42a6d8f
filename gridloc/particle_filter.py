"""A particle filter for localising a robot on an occupancy grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from gridloc.angles import (
    RandomSource,
    diff_angle,
    gaussian,
    gaussian_random,
    normalize_theta,
    uniform_random,
)
from gridloc.grid import OccupancyGrid

OCCUPIED_THRESHOLD = 90
MAX_DISTANCE = 32000.0
DIAGONAL_STEP = 1.414

_NEIGHBOURS = [(i, j) for i in (-1, 0, 1) for j in (-1, 0, 1)]


@dataclass
class Particle:
    """A pose hypothesis in world coordinates with its resampling weight."""

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0
    weight: float = 0.0

    def copy(self) -> "Particle":
        """An independent particle with the same pose and weight."""
        return Particle(self.x, self.y, self.theta, self.weight)

    def set_zero(self) -> None:
        """Reset pose and weight to zero."""
        self.x = self.y = self.theta = self.weight = 0.0


@dataclass
class LikelihoodField:
    """Row-major log-likelihoods with the grid's size and cell size."""

    values: List[float]
    width: int
    height: int
    resolution: float

    def at(self, x: int, y: int) -> float:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) lies outside the likelihood field")
        return self.values[x + y * self.width]


def calculate_distance_map(grid: OccupancyGrid) -> List[float]:
    """Distance in cells from every cell to the nearest obstacle border.

    Occupied cells next to known free space seed the map with zero; two
    chamfer passes then spread distances of 1 (straight) and 1.414 (diagonal).
    Cells never reached keep a distance of 32000.
    """
    width, height = grid.width, grid.height
    data = grid.data
    dist = [MAX_DISTANCE] * (width * height)

    def inside(x: int, y: int) -> bool:
        return 0 <= x < width and 0 <= y < height

    for x in range(width):
        for y in range(height):
            if data[x + y * width] < OCCUPIED_THRESHOLD:
                continue
            border = False
            for i, j in _NEIGHBOURS:
                nx, ny = x + i, y + j
                if not border and inside(nx, ny) and (i, j) != (0, 0):
                    value = data[nx + ny * width]
                    if 0 <= value < OCCUPIED_THRESHOLD:
                        border = True
                if border and inside(nx, ny):
                    dist[nx + ny * width] = 0.0

    def relax(x: int, y: int) -> None:
        here = x + y * width
        for i, j in _NEIGHBOURS:
            nx, ny = x + i, y + j
            if (i, j) == (0, 0) or not inside(nx, ny):
                continue
            step = DIAGONAL_STEP if i * j != 0 else 1.0
            candidate = dist[nx + ny * width] + step
            if candidate < dist[here]:
                dist[here] = candidate

    for x in range(width):
        for y in range(height):
            relax(x, y)
    for x in reversed(range(width)):
        for y in reversed(range(height)):
            relax(x, y)
    return dist


class ParticleFilter:
    """Particle set with an odometry motion model and a likelihood-field sensor model."""

    def __init__(self, number_of_particles: int, rng: Optional[RandomSource] = None) -> None:
        if number_of_particles < 0:
            raise ValueError("the number of particles cannot be negative")
        self.rng = rng
        self.particles: List[Particle] = [Particle() for _ in range(number_of_particles)]
        self.best_hypothesis = Particle()
        self.laser_skip = 5
        self.odom_alphas = (0.0, 0.0, 0.0, 0.0)
        self.distance_map: Optional[List[float]] = None
        self._field: Optional[LikelihoodField] = None

    @property
    def number_of_particles(self) -> int:
        return len(self.particles)

    def init_particles_uniform(self) -> None:
        """Spread the particles evenly over the area of the likelihood field."""
        field = self.likelihood_field()
        self.particles = [
            Particle(
                uniform_random(0.0, field.width, self.rng) * field.resolution,
                uniform_random(0.0, field.height, self.rng) * field.resolution,
                uniform_random(0.0, 2 * math.pi, self.rng),
                1.0,
            )
            for _ in self.particles
        ]

    def init_particles_gaussian(
        self,
        mean_x: float,
        mean_y: float,
        mean_theta: float,
        std_xx: float,
        std_yy: float,
        std_tt: float,
    ) -> None:
        """Draw every particle from independent Gaussians around a mean pose."""
        self.particles = [
            Particle(
                gaussian_random(mean_x, std_xx, self.rng),
                gaussian_random(mean_y, std_yy, self.rng),
                gaussian_random(mean_theta, std_tt, self.rng),
                1.0,
            )
            for _ in self.particles
        ]

    def set_motion_model_odometry(
        self, alpha1: float, alpha2: float, alpha3: float, alpha4: float
    ) -> None:
        """Set the four noise parameters of the odometry motion model."""
        self.odom_alphas = (alpha1, alpha2, alpha3, alpha4)

    def set_measurement_model_likelihood_field(
        self, grid: OccupancyGrid, z_rand: float, sigma_hit: float
    ) -> None:
        """Build the log-likelihood field for the laser from an occupancy grid.

        ``z_rand`` is the minimum likelihood of any cell; ``sigma_hit`` is the
        standard deviation of the hit distribution in metres.
        """
        if sigma_hit <= 0:
            raise ValueError("sigma_hit must be positive")
        if grid.resolution <= 0:
            raise ValueError("the grid resolution must be positive")
        self.distance_map = calculate_distance_map(grid)
        sigma_cells = sigma_hit / grid.resolution
        values = []
        for distance in self.distance_map:
            p_hit = gaussian(0.0, sigma_cells, distance)
            likelihood = (1.0 - z_rand) * p_hit + z_rand
            values.append(math.log(likelihood) if likelihood > 0 else -math.inf)
        self._field = LikelihoodField(values, grid.width, grid.height, grid.resolution)

    def likelihood_field(self) -> LikelihoodField:
        """The current likelihood field; raises RuntimeError if none was built."""
        if self._field is None:
            raise RuntimeError("no likelihood field has been set")
        return self._field

    def sample_motion_model(
        self,
        old_x: float,
        old_y: float,
        old_theta: float,
        new_x: float,
        new_y: float,
        new_theta: float,
    ) -> None:
        """Move every particle by the odometry step from the old to the new pose."""
        self._sample_motion_model_odometry(old_x, old_y, old_theta, new_x, new_y, new_theta)

    def _sample_motion_model_odometry(
        self,
        old_x: float,
        old_y: float,
        old_theta: float,
        new_x: float,
        new_y: float,
        new_theta: float,
    ) -> None:
        alpha1, alpha2, alpha3, alpha4 = self.odom_alphas
        delta_x = new_x - old_x
        delta_y = new_y - old_y
        delta_trans = math.hypot(delta_x, delta_y)
        delta_rot1 = diff_angle(old_theta, math.atan2(delta_y, delta_x))
        delta_rot2 = diff_angle(delta_rot1, new_theta - old_theta)

        std_trans = alpha3 * delta_trans + alpha4 * abs(normalize_theta(delta_rot1 + delta_rot2))
        std_rot1 = alpha1 * abs(delta_rot1) + alpha2 * delta_trans
        std_rot2 = alpha1 * abs(delta_rot2) + alpha2 * delta_trans

        for particle in self.particles:
            hat_trans = delta_trans + gaussian_random(0.0, std_trans, self.rng)
            hat_rot1 = delta_rot1 + gaussian_random(0.0, std_rot1, self.rng)
            hat_rot2 = delta_rot2 + gaussian_random(0.0, std_rot2, self.rng)

            heading = normalize_theta(particle.theta + hat_rot1)
            particle.x += hat_trans * math.cos(heading)
            particle.y += hat_trans * math.sin(heading)
            particle.theta = normalize_theta(particle.theta + hat_rot1 + hat_rot2)