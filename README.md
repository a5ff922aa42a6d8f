# gridloc

Occupancy-grid mapping and the building blocks of particle-filter
localization for a small mobile robot, together with the coordinate helpers
needed to show maps, poses and particles on screen. Everything is plain
Python with no third-party dependencies.

## Modules

- `gridloc.angles`: angle wrapping (`normalize_theta`, `diff_angle`), an
  unnormalised Gaussian bell (`gaussian`) and random samplers
  (`gaussian_random` by Box-Muller, `uniform_random`). The samplers take any
  object with a `random()` method, such as `random.Random`; without one they
  use the `random` module.
- `gridloc.transform`: a frozen `Transform` (translation plus quaternion)
  with composition (`a * b` applies `b` first), `inverse()`, `apply(point)`
  for 2-D or 3-D points and `yaw()`, plus `quaternion_from_yaw` and
  `yaw_from_quaternion`.
- `gridloc.grid`: `MapInfo`, `OccupancyGrid` (row-major, -1 unknown, 0 to 100
  occupied; `blank`, `index`, `get`, `set`, `contains`) and `LaserScan`,
  whose `beams()` yields `(index, angle, range)` for every beam below
  `angle_max`.
- `gridloc.mapping`: `bresenham_line` and `CountingMapper`, which builds a
  reflection map from laser scans: each cell holds
  `100 * hits / (hits + misses)`.
- `gridloc.particle_filter`: `Particle`, `calculate_distance_map` (chamfer
  distance to the nearest obstacle border, in cells) and `ParticleFilter`
  with uniform and Gaussian initialisation, an odometry motion model
  (`set_motion_model_odometry`, `sample_motion_model`) and a log-likelihood
  field built from a grid (`set_measurement_model_likelihood_field`,
  `likelihood_field`).
- `gridloc.map_view`: `occupancy_to_gray` (grey image of a grid, mirrored
  left to right), `arrow_segments` for drawing poses, `MapDisplay`
  (conversion between map metres and display pixels with `to_display` and
  `to_map`) and `ZoomState` (zoom factor clamped between 0.05 and 100, and
  the offset that centres the image in a window).

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Examples

Tracing a beam and mapping one scan:

    from gridloc.grid import LaserScan
    from gridloc.mapping import CountingMapper, bresenham_line

    print(bresenham_line(0, 0, 4, 2))
    # [(0, 0), (1, 0), (2, 1), (3, 1), (4, 2)]

    mapper = CountingMapper(width=200, height=200, resolution=0.05)
    scan = LaserScan(angle_min=-0.5, angle_max=0.5, angle_increment=0.1,
                     range_min=0.1, range_max=5.0, ranges=[2.0] * 11)
    mapper.integrate_scan(scan, x=0.0, y=0.0, theta=0.0)
    grid = mapper.grid  # an OccupancyGrid with frame_id "/odom"

Particles drawn with a seeded generator are reproducible:

    import random

    from gridloc.particle_filter import ParticleFilter

    pf = ParticleFilter(number_of_particles=100, rng=random.Random(1))
    pf.init_particles_gaussian(0.0, 0.0, 0.0, 0.5, 0.5, 0.26)
    pf.set_motion_model_odometry(0.2, 0.2, 0.2, 0.2)
    pf.sample_motion_model(0.0, 0.0, 0.0, 0.1, 0.0, 0.0)

`init_particles_uniform()` spreads particles over the area of the likelihood
field, so `set_measurement_model_likelihood_field(grid, z_rand, sigma_hit)`
must be called first; otherwise it raises `RuntimeError`.

## What the package does not do

- `ParticleFilter` moves particles with odometry and builds the likelihood
  field, but it does not weigh particles against a laser scan, resample them
  or compute a best pose estimate from them.
- There is no robot connection: nothing here subscribes to sensors, sends
  wheel commands or reads the battery.
- There is no window or drawing surface. `MapDisplay`, `ZoomState`,
  `occupancy_to_gray` and `arrow_segments` compute pixels, grey levels and
  segments; drawing them is left to the caller.
- There is no command-line program.