"""Geoboard: a location-tagged message board with per-user voting."""

__version__ = "0.1.0"
