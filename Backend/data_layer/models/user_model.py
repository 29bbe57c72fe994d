from typing import ClassVar, List
from pydantic import Field
from data_layer.models.base_model import MongoBaseModel


class User(MongoBaseModel):
    username: str = Field(..., min_length=3)
    password_hash: str = Field(...)
    full_name: str = Field("")
    bio: str = Field("")
    avatar: str = Field("")
    skills: List[str] = Field(default_factory=list)

    collection_name: ClassVar[str] = "users"
