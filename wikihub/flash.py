"""Per-request state kept in the signed session cookie.

The session carries three things between requests: the logged-in user,
one-shot flash messages and one-shot form validation errors. Messages and
errors are popped by the next rendered page, so each is shown exactly once.
"""
from typing import Iterable, List, Optional

from fastapi import Request

from .schemas import ValidationResult

MESSAGES_KEY = "messages"
ERRORS_KEY = "errors"
USER_KEY = "user"


def flash(request: Request, message: str, category: str = "info") -> None:
    messages = list(request.session.get(MESSAGES_KEY) or [])
    messages.append({"category": category, "message": message})
    request.session[MESSAGES_KEY] = messages


def pop_messages(request: Request) -> List[dict]:
    return request.session.pop(MESSAGES_KEY, None) or []


def store_errors(request: Request, errors: Iterable[ValidationResult]) -> None:
    request.session[ERRORS_KEY] = [error.model_dump() for error in errors]


def pop_errors(request: Request) -> List[dict]:
    return request.session.pop(ERRORS_KEY, None) or []


def current_username(request: Request) -> Optional[str]:
    user = request.session.get(USER_KEY)
    if not isinstance(user, dict):
        return None
    return user.get("username") or None


def login_user(request: Request, username: str) -> None:
    request.session[USER_KEY] = {"username": username}


def logout_user(request: Request) -> None:
    request.session.clear()
