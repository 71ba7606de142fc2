"""Small helpers: environment probing, time values and an API doc generator."""

__version__ = "0.1.0"
