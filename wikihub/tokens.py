from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import crud
from .config import settings
from .database import get_db
from .models import User

bearer_scheme = HTTPBearer(auto_error=False)


class TokenError(Exception):
    """Raised when a bearer token cannot be decoded or has expired."""


def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    expires = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    payload = {"sub": username, "exp": expires}
    return jwt.encode(payload, settings.token_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Return the username carried by a valid token."""
    try:
        payload = jwt.decode(
            token, settings.token_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("Invalid token") from exc

    username = payload.get("sub")
    if not username:
        raise TokenError("Token has no subject")
    return username


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_api_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        username = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc))

    user = crud.get_user_by_username(db, username)
    if not user:
        raise _unauthorized("Unknown user")
    return user
