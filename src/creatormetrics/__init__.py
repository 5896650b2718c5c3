"""Creator performance metrics: sales, ratings, growth and synthetic daily series."""

__version__ = "0.1.0"
