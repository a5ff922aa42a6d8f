import math
import random

import pytest

from gridloc.grid import MapInfo, OccupancyGrid
from gridloc.particle_filter import (
    Particle,
    ParticleFilter,
    calculate_distance_map,
)


def make_grid(width, height, data, resolution=0.1):
    return OccupancyGrid(MapInfo(width, height, resolution), list(data))


def test_particle_copy_is_independent():
    p = Particle(1.0, 2.0, 0.5, 0.25)
    q = p.copy()
    assert q == p
    q.x = 9.0
    assert p.x == 1.0


def test_particle_set_zero():
    p = Particle(1.0, 2.0, 0.5, 0.25)
    p.set_zero()
    assert (p.x, p.y, p.theta, p.weight) == (0.0, 0.0, 0.0, 0.0)


def test_distance_map_without_obstacles_keeps_maximum():
    grid = make_grid(3, 2, [0] * 6)
    assert calculate_distance_map(grid) == [32000.0] * 6


def test_distance_map_occupied_next_to_unknown_has_no_border():
    grid = make_grid(2, 1, [100, -1])
    assert calculate_distance_map(grid) == [32000.0, 32000.0]


def test_distance_map_row_with_wall_at_left():
    grid = make_grid(5, 1, [100, 0, 0, 0, 0])
    assert calculate_distance_map(grid) == [1.0, 0.0, 1.0, 2.0, 3.0]


def test_distance_map_neighbours_differ_by_at_most_one_step():
    data = [0] * 49
    data[3 + 3 * 7] = 100
    grid = make_grid(7, 7, data)
    dist = calculate_distance_map(grid)
    assert min(dist) == 0.0
    for x in range(7):
        for y in range(7):
            for dx, dy in ((1, 0), (0, 1)):
                if x + dx < 7 and y + dy < 7:
                    a = dist[x + y * 7]
                    b = dist[x + dx + (y + dy) * 7]
                    assert abs(a - b) <= 1.0 + 1e-9


def test_likelihood_field_before_setup_raises():
    pf = ParticleFilter(3, random.Random(1))
    with pytest.raises(RuntimeError):
        pf.likelihood_field()


def test_likelihood_field_values():
    grid = make_grid(5, 1, [100, 0, 0, 0, 0], resolution=0.1)
    pf = ParticleFilter(1, random.Random(1))
    pf.set_measurement_model_likelihood_field(grid, 0.5, 0.05)
    field = pf.likelihood_field()
    assert (field.width, field.height, field.resolution) == (5, 1, 0.1)
    assert field.at(1, 0) == pytest.approx(0.0)
    values = [field.at(x, 0) for x in range(1, 5)]
    assert values == sorted(values, reverse=True)
    assert all(v <= 0.0 for v in field.values)
    assert all(v >= math.log(0.5) - 1e-12 for v in field.values)


def test_likelihood_field_far_cells_reach_z_rand():
    grid = make_grid(3, 1, [0, 0, 0])
    pf = ParticleFilter(1, random.Random(1))
    pf.set_measurement_model_likelihood_field(grid, 0.3, 0.2)
    assert pf.likelihood_field().values == pytest.approx([math.log(0.3)] * 3)


def test_likelihood_field_rejects_non_positive_sigma():
    grid = make_grid(2, 1, [0, 0])
    pf = ParticleFilter(1)
    with pytest.raises(ValueError):
        pf.set_measurement_model_likelihood_field(grid, 0.5, 0.0)


def test_negative_particle_count_raises():
    with pytest.raises(ValueError):
        ParticleFilter(-1)


def test_uniform_requires_likelihood_field():
    pf = ParticleFilter(4, random.Random(2))
    with pytest.raises(RuntimeError):
        pf.init_particles_uniform()


def test_uniform_particles_lie_inside_map():
    grid = make_grid(20, 10, [0] * 200, resolution=0.5)
    pf = ParticleFilter(200, random.Random(3))
    pf.set_measurement_model_likelihood_field(grid, 0.5, 0.2)
    pf.init_particles_uniform()
    assert pf.number_of_particles == 200
    for p in pf.particles:
        assert 0.0 <= p.x <= 20 * 0.5
        assert 0.0 <= p.y <= 10 * 0.5
        assert 0.0 <= p.theta <= 2 * math.pi
        assert p.weight == 1.0


def test_gaussian_with_zero_spread_places_all_at_mean():
    pf = ParticleFilter(10, random.Random(4))
    pf.init_particles_gaussian(1.5, -2.0, 0.3, 0.0, 0.0, 0.0)
    assert len(pf.particles) == 10
    for p in pf.particles:
        assert (p.x, p.y, p.theta, p.weight) == (1.5, -2.0, 0.3, 1.0)


def test_gaussian_sample_mean_close_to_requested_mean():
    pf = ParticleFilter(4000, random.Random(5))
    pf.init_particles_gaussian(2.0, -1.0, 0.0, 0.5, 0.5, 0.1)
    mean_x = sum(p.x for p in pf.particles) / len(pf.particles)
    mean_y = sum(p.y for p in pf.particles) / len(pf.particles)
    assert mean_x == pytest.approx(2.0, abs=0.05)
    assert mean_y == pytest.approx(-1.0, abs=0.05)


def test_noise_free_motion_moves_particles_exactly():
    pf = ParticleFilter(5, random.Random(6))
    pf.set_motion_model_odometry(0.0, 0.0, 0.0, 0.0)
    pf.init_particles_gaussian(0.0, 0.0, math.pi / 2, 0.0, 0.0, 0.0)
    pf.sample_motion_model(0.0, 0.0, 0.0, 1.0, 0.0, 0.0)
    for p in pf.particles:
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(1.0)
        assert p.theta == pytest.approx(math.pi / 2)


def test_noise_free_rotation_in_place():
    pf = ParticleFilter(3, random.Random(7))
    pf.set_motion_model_odometry(0.0, 0.0, 0.0, 0.0)
    pf.init_particles_gaussian(1.0, 1.0, 0.0, 0.0, 0.0, 0.0)
    pf.sample_motion_model(0.0, 0.0, 0.0, 0.0, 0.0, math.pi / 2)
    for p in pf.particles:
        assert (p.x, p.y) == (1.0, 1.0)
        assert p.theta == pytest.approx(math.pi / 2)


def test_noisy_motion_is_reproducible_and_normalised():
    def run(seed):
        pf = ParticleFilter(50, random.Random(seed))
        pf.set_motion_model_odometry(0.2, 0.2, 0.2, 0.2)
        pf.init_particles_gaussian(0.0, 0.0, 0.0, 0.1, 0.1, 0.1)
        pf.sample_motion_model(0.0, 0.0, 0.0, 0.5, 0.2, 0.4)
        return [(p.x, p.y, p.theta) for p in pf.particles]

    first = run(11)
    assert first == run(11)
    assert len({pose for pose in first}) > 1
    assert all(-math.pi <= theta < math.pi for _, _, theta in first)