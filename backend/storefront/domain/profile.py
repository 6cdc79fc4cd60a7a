"""
Profile and role Domain Models

Accounts themselves live in Supabase Auth. The profiles table holds the
customer-facing details and user_roles marks administrators.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class Profile(BaseModel):
    id: Optional[str] = None
    user_id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    # From user_roles JOIN (admin listing)
    role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value

    @property
    def initials(self) -> str:
        """Avatar initials ("John Doe" -> "JD")"""
        if not self.full_name:
            return ""
        return "".join(part[0] for part in self.full_name.split()[:2]).upper()

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['initials'] = self.initials
        if self.created_at:
            data['created_at'] = self.created_at.isoformat()
        return data


class ProfileUpdate(BaseModel):
    """Partial update of the caller's profile"""
    full_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)


class UserRole(BaseModel):
    user_id: str
    role: str = ROLE_USER

    @field_validator("user_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else value
