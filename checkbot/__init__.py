"""Repository check and stable-promotion issue tracking bot."""

__version__ = "0.3.0"
