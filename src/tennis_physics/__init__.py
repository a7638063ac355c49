"""Tennis ball impact and flight simulation."""

__version__ = "0.1.0"
