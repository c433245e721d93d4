import logging
from typing import Optional

from fastapi import Depends, Request
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import crud
from .database import get_db
from .flash import current_username
from .models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class LoginRequired(Exception):
    """Raised by the login guard; the app turns it into a redirect to /login."""

    def __init__(self):
        super().__init__("You must be logged in to access this page.")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = crud.get_user_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    username = current_username(request)
    if not username:
        return None
    return crud.get_user_by_username(db, username)


def require_login(request: Request, current_user: Optional[User] = Depends(get_current_user)) -> User:
    if not current_user:
        logger.info("Anonymous request to guarded path %s", request.url.path)
        raise LoginRequired()
    return current_user
