"""Assembly construction from build specifications."""

from .builder import AssemblyBuilder

__all__ = ["AssemblyBuilder"]
