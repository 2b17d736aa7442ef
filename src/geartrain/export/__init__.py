"""File export for parts and assemblies."""

from .exporter import Exporter

__all__ = ["Exporter"]
