"""Vehicle address pool: unique postal address allocation for active vehicles."""

__version__ = "1.0.0"
