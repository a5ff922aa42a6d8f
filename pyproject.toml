[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridloc"
version = "0.1.0"
description = "Occupancy-grid mapping, particle-filter motion sampling and map display geometry for a mobile robot"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "particle filter", "localization", "occupancy grid", "mapping", "bresenham", "likelihood field"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gridloc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
