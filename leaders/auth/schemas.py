from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class UserRegister(BaseModel):
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator('password')
    @classmethod
    def password_length(cls, v):
        if len(v) < 6:
            raise ValueError("Le mot de passe doit contenir au moins 6 caractères")
        return v


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def email_required(cls, v):
        if not v or v.strip() == "":
            raise ValueError("Email requis")
        return v.strip()


class UserOut(BaseModel):
    id: int
    email: str
    role: str
    photo: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    bio: Optional[str] = None
    languages: List[str] = []
    interests: List[str] = []
    intentions: List[str] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator('languages', 'interests', 'intentions', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class LogoutResponse(BaseModel):
    msg: str
