"""Make your terminal into a big clock, with an optional time bar."""

__version__ = "0.4.0"

__all__ = ["__version__"]
