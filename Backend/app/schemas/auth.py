from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from utils.validation_utils import validate_password_strength, validate_username


class Token(BaseModel):
    id: str
    username: str
    token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    username: str
    password: str
    full_name: Optional[str] = None

    @field_validator('username')
    @classmethod
    def check_username(cls, v):
        v = v.strip()
        result = validate_username(v)
        if not result["is_valid"]:
            raise ValueError(
                f"Invalid username. Requirements: {result['requirements']}")
        return v

    @field_validator('password')
    @classmethod
    def check_password(cls, v):
        result = validate_password_strength(v)
        if not result["is_valid"]:
            raise ValueError(
                f"Password too weak. Requirements: {result['requirements']}")
        return v


class UserLogin(BaseModel):
    username: str
    password: str


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    skills: Optional[List[str]] = None


class UserResponse(BaseModel):
    id: str
    username: str
    full_name: str = ""
    bio: str = ""
    avatar: str = ""
    skills: List[str] = Field(default_factory=list)
