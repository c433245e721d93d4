import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..auth import require_login
from ..csrf import verify_csrf
from ..database import get_db
from ..flash import flash, store_errors
from ..rendering import page_html
from ..templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["wiki"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/wiki/{page_name:path}", response_class=HTMLResponse)
def view_page(page_name: str, request: Request, db: Session = Depends(get_db)):
    page = crud.get_page_by_title(db, page_name)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="This page doesn't exist")

    return render(
        request,
        "wiki/page.html",
        {
            "page": page,
            "page_name": page_name,
            "html_content": page_html(page),
            "page_title": page.title,
        },
    )


@router.get("/create", response_class=HTMLResponse)
def create_page_form(request: Request, current_user: models.User = Depends(require_login)):
    return render(request, "wiki/create.html", {"page_title": "Create page"})


@router.post("/create", response_class=HTMLResponse)
async def create_page(
    request: Request,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(require_login),
    _csrf: None = Depends(verify_csrf),
):
    form = await request.form()
    try:
        data = schemas.PageForm(
            title=form.get("title") or "",
            content=form.get("content") or "",
            is_markdown=form.get("is_markdown") == "on",
        )
    except ValidationError as exc:
        store_errors(request, schemas.format_errors(exc))
        return _redirect("/create")

    try:
        crud.create_page(
            db,
            title=data.title,
            content=data.content,
            is_markdown=data.is_markdown,
            author=current_user,
        )
    except crud.DuplicateError:
        flash(request, "A page with that title already exists!", "danger")
        return _redirect("/create")
    except crud.StorageError:
        logger.exception("Could not create page %r", data.title)
        flash(request, "Failed to create page.", "danger")
        return _redirect("/create")

    logger.info("User %s created page %r", current_user.username, data.title)
    flash(request, "Page created successfully!", "success")
    return _redirect(f"/wiki/{quote(data.title, safe='')}")
