"""
SQLAlchemy models for blueprint headers and their points.

Exposes `Base` and the ORM classes so callers can write
`models.Blueprint` / `models.BlueprintPoint`.
"""

from .base import Base  # re-export

from .blueprints import Blueprint, BlueprintPoint

__all__ = [
    "Base",
    "Blueprint",
    "BlueprintPoint",
]
