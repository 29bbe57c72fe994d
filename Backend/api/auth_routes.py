from fastapi import APIRouter, Depends
from app.schemas.auth import Token, UserCreate, UserLogin, ProfileUpdate, UserResponse
from core.exceptions import AuthenticationError, NotFoundError, ValidationError
from data_layer.repos.user_repo import UserRepository
from data_layer.models.user_model import User
from pymongo.errors import DuplicateKeyError
from utils.jwt import extract_user_id_from_token
from utils.security_utils import create_access_token, hash_password, verify_password
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])
user_repo = UserRepository()


def issue_token(user: User) -> Token:
    token = create_access_token({"user_id": user.id, "sub": user.id, "username": user.username})
    return Token(id=user.id, username=user.username, token=token)


@router.post("/register", response_model=Token, status_code=201)
def register(data: UserCreate):
    if user_repo.username_exists(data.username):
        raise ValidationError("Username already taken", error_type="username_taken",
                              details={"username": data.username})
    user = User.validated(
        username=data.username,
        password_hash=hash_password(data.password),
        full_name=data.full_name or "",
    )
    try:
        created = user_repo.create(user)
    except DuplicateKeyError:
        raise ValidationError("Username already taken", error_type="username_taken",
                              details={"username": data.username})
    logger.info(f"✅ Registered user {created.username}")
    return issue_token(created)


@router.post("/login", response_model=Token)
def login(data: UserLogin):
    user = user_repo.find_by_username(data.username.strip())
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning(f"Failed login for {data.username}")
        raise AuthenticationError("Invalid credentials", error_type="invalid_credentials")
    return issue_token(user)


def current_user(user_id: str = Depends(extract_user_id_from_token)) -> User:
    user = user_repo.find_by_id(user_id)
    if not user:
        raise NotFoundError("User not found", details={"id": user_id})
    return user


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(current_user)):
    return UserResponse(**user.model_dump())


@router.put("/profile", response_model=UserResponse)
def update_profile(data: ProfileUpdate, user: User = Depends(current_user)):
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return UserResponse(**user.model_dump())
    updated = user_repo.update_fields(user, changes)
    return UserResponse(**updated.model_dump())
