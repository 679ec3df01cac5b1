from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

# Column bounds: x/y/position_index are INT, author/name VARCHAR(120)
INT_MIN = -2**31
INT_MAX = 2**31 - 1
NAME_MAX_LENGTH = 120


class Point(BaseModel):
    x: int = Field(ge=INT_MIN, le=INT_MAX)
    y: int = Field(ge=INT_MIN, le=INT_MAX)
    model_config = ConfigDict(frozen=True)


class BlueprintBase(BaseModel):
    author: str
    name: str
    points: List[Point] = Field(default_factory=list)


class BlueprintCreate(BlueprintBase):
    """Request body for creating a blueprint; author and name must be non-blank."""

    author: str = Field(max_length=NAME_MAX_LENGTH)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    points: List[Point]

    @field_validator("author", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value


class Blueprint(BlueprintBase):
    pass


class PointCreate(BaseModel):
    x: int = Field(ge=INT_MIN, le=INT_MAX)
    y: int = Field(ge=INT_MIN, le=INT_MAX)


class ApiResponse(BaseModel, Generic[T]):
    code: int
    message: str
    data: Optional[T] = None
