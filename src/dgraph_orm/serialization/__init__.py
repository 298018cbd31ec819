"""Conversion between raw query results and node instances."""
