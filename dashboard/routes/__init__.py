"""Dashboard routes."""

from .dose_calculation import dose_calculation_bp

__all__ = [
    "dose_calculation_bp",
]
