import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import require_login
from ..config import settings
from ..csrf import verify_csrf
from ..database import get_db
from ..flash import flash
from ..templating import render
from ..uploads import InvalidUpload, remove_avatar, save_avatar

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/profile", response_class=HTMLResponse)
def profile(request: Request, current_user: models.User = Depends(require_login)):
    return render(
        request,
        "profile.html",
        {"user": current_user, "page_title": "Profile"},
    )


@router.post("/profile", response_class=HTMLResponse)
async def upload_avatar(
    request: Request,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_login),
    _csrf: None = Depends(verify_csrf),
):
    form = await request.form()
    try:
        filename = save_avatar(form.get("avatar"), settings.upload_dir)
    except InvalidUpload:
        flash(request, "No file selected or invalid file type.", "danger")
        return _redirect("/profile")

    previous = current_user.avatar
    try:
        crud.update_avatar(db, current_user, filename)
    except crud.StorageError:
        logger.exception("Could not update avatar for %s", current_user.username)
        remove_avatar(settings.upload_dir, filename)
        flash(request, "Error updating avatar. Please try again.", "danger")
        return _redirect("/profile")

    if previous:
        remove_avatar(settings.upload_dir, previous)
    logger.info("User %s updated avatar to %s", current_user.username, filename)
    flash(request, "Avatar updated successfully!", "success")
    return _redirect("/profile")
