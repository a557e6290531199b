"""A small content-addressed version control library with signed commits."""

__version__ = "0.1.0"