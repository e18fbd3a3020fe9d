from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

GROUP_COLORS = ["#ef4444", "#3b82f6", "#22c55e", "#eab308", "#8b5cf6", "#ec4899"]


def _check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in GROUP_COLORS:
        raise ValueError(f"color must be one of {', '.join(GROUP_COLORS)}")
    return value


class GroupCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = GROUP_COLORS[0]

    validate_color = field_validator("color")(_check_color)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None

    validate_color = field_validator("color")(_check_color)


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class GroupCountsResponse(BaseModel):
    group_id: str
    user_count: int
    document_count: int


class GroupWithCountsResponse(GroupResponse):
    user_count: int = 0
    document_count: int = 0
