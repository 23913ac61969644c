"""WBJEE Finder: serves the ORCR cutoff dataset over HTTP."""

__version__ = "1.0.0"
