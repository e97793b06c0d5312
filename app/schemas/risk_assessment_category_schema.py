from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Category name is required")
        return value.strip()


class CategoryCreateRequest(CategoryRequest):
    pass


class CategoryUpdateRequest(CategoryRequest):
    pass


class CategoryResponse(BaseModel):
    category_id: int
    name: str
    description: Optional[str] = None
    assessment_count: int = 0
    created_by: str
    created_date: datetime
    modified_by: Optional[str] = None
    modified_date: Optional[datetime] = None
