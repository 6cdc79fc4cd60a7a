"""
Review Domain Models
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

MAX_COMMENT_LENGTH = 1000


class Review(BaseModel):
    """A product review left by a customer"""

    id: str
    product_id: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    # From profiles JOIN
    reviewer_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "product_id", "user_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value

    def to_dict(self) -> dict:
        data = self.model_dump()
        if self.created_at:
            data['created_at'] = self.created_at.isoformat()
        return data


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def _strip_comment(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if len(value) > MAX_COMMENT_LENGTH:
            raise ValueError(f"comment must be at most {MAX_COMMENT_LENGTH} characters")
        return value or None


class RatingSummary(BaseModel):
    """Average rating and number of reviews for a product"""
    product_id: str
    rating: Optional[float] = None
    reviews_count: int = 0
