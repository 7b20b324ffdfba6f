"""CulinaLens: recipe discovery and weekly meal planning."""

__version__ = "0.1.0"
