from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime

# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

# Schema for user registration requests
class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=1)

# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

# Public user record, the password hash is never part of it
class UserResponse(ORMBase):
    id: int
    username: str
    email: str
    created_at: Optional[datetime] = None

# User record including contact details, used by the profile endpoints
class UserProfile(UserResponse):
    phone: Optional[str] = None
    address: Optional[str] = None

# Schema for PUT /api/users/{id}
class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None

# Schema for PUT /api/auth/profile; "name" is the frontend label for username
class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None

# Identity carried by a verified bearer token
class CurrentUser(BaseModel):
    id: int
    email: str
    username: str
