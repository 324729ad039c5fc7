"""Device web request routing, file store access, URL splitting and constants."""

__version__ = "0.1.0"