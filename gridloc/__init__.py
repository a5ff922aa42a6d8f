"""Occupancy-grid mapping, particle-filter motion sampling and map display geometry."""

__version__ = "0.1.0"