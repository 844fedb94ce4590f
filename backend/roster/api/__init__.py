"""HTTP blueprints for the roster backend."""

from .patients import bp as patients_bp

__all__ = ["patients_bp"]
