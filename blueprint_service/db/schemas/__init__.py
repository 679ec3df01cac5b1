"""
Pydantic schemas for the blueprint aggregate and the API envelope.
"""

from .blueprints import (
    INT_MIN,
    INT_MAX,
    NAME_MAX_LENGTH,
    Point,
    PointCreate,
    BlueprintBase,
    BlueprintCreate,
    Blueprint,
    ApiResponse,
)

__all__ = [
    "INT_MIN",
    "INT_MAX",
    "NAME_MAX_LENGTH",
    "Point",
    "PointCreate",
    "BlueprintBase",
    "BlueprintCreate",
    "Blueprint",
    "ApiResponse",
]
