from pydantic import BaseModel, EmailStr, Field


class LoginCredentials(BaseModel):
    """Model for user login credentials"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Identity as exposed to clients"""
    id: str
    email: str
    role: str
    name: str


class CurrentUserResponse(BaseModel):
    user: UserResponse


class LoginResponse(BaseModel):
    """Model for a successful admin login"""
    user: UserResponse
    token: str
