"""Parametric spur, ring, planetary and gearbox generator."""

__version__ = "0.1.0"
