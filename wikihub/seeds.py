from __future__ import annotations

import argparse
import logging

from faker import Faker
from sqlalchemy import select

from .auth import hash_password
from .database import Base, engine, session_scope
from .models import Page, User

logger = logging.getLogger(__name__)

fake = Faker()
Faker.seed(1234)

DEMO_PASSWORD = "password123"


def seed(users_count: int, pages_per_user: int) -> dict:
    """Seed the database with deterministic, idempotent demo data.

    - Users are uniquely identified by username: user{n}
    - Each user authors N Markdown pages titled "user{n} page {m}"
    - Running the seeder twice does not duplicate anything
    """
    created = {"users": 0, "pages": 0}
    with session_scope() as session:
        existing_users = {u.username: u for u in session.scalars(select(User)).all()}
        existing_titles = set(session.scalars(select(Page.title)).all())

        for n in range(1, users_count + 1):
            username = f"user{n}"
            user = existing_users.get(username)
            if user is None:
                user = User(username=username, password_hash=hash_password(DEMO_PASSWORD))
                session.add(user)
                existing_users[username] = user
                created["users"] += 1

            for m in range(1, pages_per_user + 1):
                title = f"{username} page {m}"
                if title in existing_titles:
                    continue
                paragraphs = "\n\n".join(fake.paragraphs(nb=3))
                session.add(
                    Page(
                        title=title,
                        content=f"# {fake.sentence(nb_words=4)}\n\n{paragraphs}\n",
                        is_markdown=True,
                        author=user,
                    )
                )
                existing_titles.add(title)
                created["pages"] += 1

    logger.info("Seeded %(users)s users and %(pages)s pages", created)
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the wiki with demo users and pages.")
    parser.add_argument("--users", type=int, default=5)
    parser.add_argument("--pages-per-user", type=int, default=3)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    seed(args.users, args.pages_per_user)


if __name__ == "__main__":
    main()
