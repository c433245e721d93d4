from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models


class StorageError(RuntimeError):
    """Raised when a commit fails; the session has already been rolled back."""


class DuplicateError(StorageError):
    """Raised when a commit violates a unique constraint."""


def _commit(db: Session) -> None:
    """Commit the session, translating SQLAlchemy errors for the route layer."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateError("Unique constraint failed") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError("Database commit failed") from exc


# User CRUD


def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    stmt = select(models.User).where(models.User.username == username)
    return db.execute(stmt).scalar_one_or_none()


def create_user(db: Session, username: str, password_hash: str) -> models.User:
    if get_user_by_username(db, username) is not None:
        raise DuplicateError(f"User {username!r} already exists")

    user = models.User(username=username, password_hash=password_hash)
    db.add(user)
    _commit(db)
    db.refresh(user)
    return user


def update_avatar(db: Session, user: models.User, filename: str) -> models.User:
    user.avatar = filename
    _commit(db)
    db.refresh(user)
    return user


# Page CRUD


def get_page_by_title(db: Session, title: str) -> Optional[models.Page]:
    stmt = select(models.Page).where(models.Page.title == title)
    return db.execute(stmt).scalar_one_or_none()


def create_page(
    db: Session,
    title: str,
    content: str,
    is_markdown: bool = False,
    author: Optional[models.User] = None,
) -> models.Page:
    page = models.Page(title=title, content=content, is_markdown=is_markdown, author=author)
    db.add(page)
    _commit(db)
    db.refresh(page)
    return page


def get_recent_pages(db: Session, limit: int = 10) -> List[models.Page]:
    stmt = (
        select(models.Page)
        .order_by(models.Page.created_at.desc(), models.Page.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


# Quote CRUD


def create_quote(db: Session, author: str, text: str) -> models.Quote:
    quote = models.Quote(author=author, text=text)
    db.add(quote)
    _commit(db)
    db.refresh(quote)
    return quote


def get_quotes(db: Session) -> List[models.Quote]:
    stmt = select(models.Quote).order_by(models.Quote.id.desc())
    return list(db.execute(stmt).scalars().all())


def search_quotes(db: Session, author: str) -> List[models.Quote]:
    """Case-insensitive substring match on the quote author."""
    needle = author.lower()
    stmt = (
        select(models.Quote)
        .where(func.lower(models.Quote.author).contains(needle, autoescape=True))
        .order_by(models.Quote.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


# Task CRUD


def get_tasks(db: Session, owner: models.User) -> List[models.Task]:
    stmt = (
        select(models.Task)
        .where(models.Task.owner_id == owner.id)
        .order_by(models.Task.id)
    )
    return list(db.execute(stmt).scalars().all())


def create_task(db: Session, owner: models.User, title: str) -> models.Task:
    task = models.Task(title=title, owner_id=owner.id)
    db.add(task)
    _commit(db)
    db.refresh(task)
    return task


def delete_task(db: Session, owner: models.User, task_id: int) -> bool:
    """Delete one of the owner's tasks.

    Returns:
        True if a task was deleted, False if it did not exist or belongs
        to another user.
    """
    task = db.get(models.Task, task_id)
    if task is None or task.owner_id != owner.id:
        return False

    db.delete(task)
    _commit(db)
    return True
