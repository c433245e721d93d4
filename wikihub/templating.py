from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .config import PACKAGE_DIR, settings
from .csrf import get_csrf_token
from .flash import current_username, pop_errors, pop_messages

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))
templates.env.globals["app_name"] = settings.app_name


def render(
    request: Request,
    template: str,
    context: Optional[dict] = None,
    status_code: int = 200,
):
    """Render a page with the session state every layout needs.

    Pending flash messages and form errors are popped here, so they are
    delivered to exactly one rendered page.
    """
    base_context = {
        "username": current_username(request),
        "messages": pop_messages(request),
        "errors": pop_errors(request),
        "csrf_token": get_csrf_token(request),
    }
    base_context.update(context or {})
    return templates.TemplateResponse(
        request, template, base_context, status_code=status_code
    )
