from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class UserProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    bio: Optional[str] = None
    languages: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    intentions: Optional[List[str]] = None

    model_config = ConfigDict(extra="ignore")


class RoleUpdate(BaseModel):
    role: str


class PhotoResponse(BaseModel):
    message: str
    photo: str
