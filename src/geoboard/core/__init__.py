"""Core configuration for Geoboard."""
