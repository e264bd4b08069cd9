"""HTTP API for Geoboard."""
