from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class ValidationResult(BaseModel):
    loc: str
    msg: str


def _required(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value


def _length(value: str, low: int, high: int, message: str) -> str:
    if not low <= len(value) <= high:
        raise ValueError(message)
    return value


class RegisterForm(BaseModel):
    username: str = ""
    password: str = ""

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = _required(value, "Username is required").strip()
        return _length(value, 3, 25, "Username must be 3-25 characters")

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        _required(value, "Password is required")
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class LoginForm(BaseModel):
    username: str = ""
    password: str = ""

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _required(value, "Username is required").strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _required(value, "Password is required")


class PageForm(BaseModel):
    title: str = ""
    content: str = ""
    is_markdown: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        value = _required(value, "Page title is required").strip()
        return _length(value, 1, 255, "Page title must be at most 255 characters")

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return _required(value, "Content is required")


class QuoteForm(BaseModel):
    author: str = ""
    quote: str = ""

    @field_validator("author")
    @classmethod
    def validate_author(cls, value: str) -> str:
        value = _required(value, "Name is required").strip()
        return _length(value, 3, 25, "Name must be 3-25 characters")

    @field_validator("quote")
    @classmethod
    def validate_quote(cls, value: str) -> str:
        value = _required(value, "Quote is required").strip()
        return _length(value, 1, 300, "Quote must be under 300 characters")


class QuoteSearchForm(BaseModel):
    author: str = ""

    @field_validator("author")
    @classmethod
    def validate_author(cls, value: str) -> str:
        value = _required(value, "Name is required").strip()
        return _length(value, 3, 25, "Name must be 3-25 characters")


# JSON API


class TokenRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TaskCreate(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        value = _required(value, "Title is required").strip()
        return _length(value, 1, 200, "Title must be at most 200 characters")


class TaskOut(BaseModel):
    id: int
    title: str
    done: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


def format_errors(exc: ValidationError) -> List[ValidationResult]:
    results = []
    for error in exc.errors():
        msg = error["msg"]
        if error["type"] == "value_error":
            msg = str(error["ctx"]["error"])
        results.append(
            ValidationResult(loc=".".join(str(p) for p in error["loc"]), msg=msg)
        )
    return results
