import jwt
from fastapi import Header, HTTPException
from core.config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def extract_user_id_from_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        logger.warning("Invalid or missing authorization header")
        raise HTTPException(status_code=401, detail="Invalid or missing token",
                            headers={"WWW-Authenticate": "Bearer"})

    token = authorization.split(" ", 1)[1].strip()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key,
                            algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = claims.get("user_id") or claims.get("sub")
    if not user_id:
        logger.warning("Token missing user_id claim")
        raise HTTPException(
            status_code=401, detail="user_id not found in token")

    return str(user_id)
