from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class MemberBase(BaseModel):
    """Base model for member data"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    membership_type: str = Field(..., min_length=1)
    start_date: datetime
    end_date: Optional[datetime] = None
    amount_paid: float = Field(0.0, ge=0)
    photo: Optional[str] = None
    photo_front: Optional[str] = None
    photo_back: Optional[str] = None


class MemberCreate(MemberBase):
    """Model for member creation request"""


class MemberUpdate(BaseModel):
    """Partial member update"""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    membership_type: Optional[str] = Field(None, min_length=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    amount_paid: Optional[float] = Field(None, ge=0)
    photo: Optional[str] = None
    photo_front: Optional[str] = None
    photo_back: Optional[str] = None


class MemberResponse(MemberBase):
    """Model for member response data"""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
