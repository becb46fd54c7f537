# api/schemas/profile.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class ProfileBase(BaseModel):
    full_name: str
    email: str
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

class ProfileCreate(ProfileBase):
    pass

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

class Profile(ProfileBase):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class OwnerSummary(BaseModel):
    user_id: str
    full_name: str
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
