import logging
import secrets

from fastapi import Request

from .config import settings

logger = logging.getLogger(__name__)

SESSION_KEY = "csrf_token"
FORM_FIELD = "csrf_token"
HEADER_NAME = "X-CSRF-Token"


class CSRFError(Exception):
    """Raised when a form submission carries a missing or wrong CSRF token."""


def get_csrf_token(request: Request) -> str:
    token = request.session.get(SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[SESSION_KEY] = token
    return token


async def verify_csrf(request: Request) -> None:
    if not settings.csrf_enabled:
        return

    form = await request.form()
    submitted = form.get(FORM_FIELD) or request.headers.get(HEADER_NAME) or ""
    expected = request.session.get(SESSION_KEY) or ""
    if (
        not isinstance(submitted, str)
        or not expected
        or not secrets.compare_digest(submitted.encode("utf-8"), expected.encode("utf-8"))
    ):
        logger.warning("CSRF token validation failed for %s", request.url.path)
        raise CSRFError("Invalid or missing CSRF token.")
