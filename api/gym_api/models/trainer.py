from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class TrainerBase(BaseModel):
    """Base model for trainer data"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    specialization: Optional[str] = None
    is_active: bool = True


class TrainerCreate(TrainerBase):
    """Model for trainer creation request"""
    password: str = Field(..., min_length=6)


class TrainerUpdate(BaseModel):
    """Partial update; a new password is re-hashed"""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    specialization: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)


class TrainerResponse(TrainerBase):
    """Trainer as returned by the API, never including the password hash"""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrainerLoginResponse(BaseModel):
    trainer: TrainerResponse
    token: str
