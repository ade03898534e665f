"""Transit trip-planning form: station catalog, line ordering and suggestions."""

__version__ = "0.1.0"
