"""Domain Entities - Staff accounts"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from typing import Optional

from domain.enums import StaffRole


class User(BaseModel):
    """Staff member who operates check-in, check-out and billing"""
    user_id: UUID = Field(default_factory=uuid4)
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: StaffRole = StaffRole.HOST
    disabled: bool = False

    class Config:
        from_attributes = True

    @property
    def display_name(self) -> str:
        """Name recorded on check-in, check-out and billing actions"""
        return self.full_name or self.username


class UserInDB(User):
    """User with hashed password for DB storage"""
    hashed_password: str
