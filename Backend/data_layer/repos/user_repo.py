from data_layer.models.user_model import User
from .base_repo import BaseMongoRepository
from typing import Optional


class UserRepository(BaseMongoRepository[User]):
    def __init__(self):
        super().__init__(User)

    def find_by_username(self, username: str) -> Optional[User]:
        return self.find_one({"username": username})

    def username_exists(self, username: str) -> bool:
        return self.count({"username": username}) > 0
