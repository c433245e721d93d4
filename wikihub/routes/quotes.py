import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..csrf import verify_csrf
from ..database import get_db
from ..flash import flash
from ..templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.get("", response_class=HTMLResponse)
def list_quotes(request: Request, db: Session = Depends(get_db)):
    return render(
        request,
        "quotes/list.html",
        {"quotes": crud.get_quotes(db), "page_title": "Quotes"},
    )


@router.get("/share", response_class=HTMLResponse)
def share_form(request: Request):
    return render(
        request,
        "quotes/share.html",
        {"form_values": {}, "page_title": "Share a quote"},
    )


@router.post("/share", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
async def share(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    form_values = {"author": form.get("author") or "", "quote": form.get("quote") or ""}
    try:
        data = schemas.QuoteForm(**form_values)
    except ValidationError as exc:
        return render(
            request,
            "quotes/share.html",
            {
                "errors": [e.model_dump() for e in schemas.format_errors(exc)],
                "form_values": form_values,
                "page_title": "Share a quote",
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        crud.create_quote(db, author=data.author, text=data.quote)
    except crud.StorageError:
        logger.exception("Could not save quote by %s", data.author)
        flash(request, "Failed to share quote.", "danger")
        return RedirectResponse(url="/quotes/share", status_code=status.HTTP_303_SEE_OTHER)

    flash(request, "Quote shared!", "success")
    return RedirectResponse(url="/quotes", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/search", response_class=HTMLResponse)
def search_form(request: Request):
    return render(
        request,
        "quotes/search.html",
        {"quotes": [], "searched": False, "form_values": {}, "page_title": "Search quotes"},
    )


@router.post("/search", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
async def search(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    form_values = {"author": form.get("author") or ""}
    try:
        data = schemas.QuoteSearchForm(**form_values)
    except ValidationError as exc:
        return render(
            request,
            "quotes/search.html",
            {
                "errors": [e.model_dump() for e in schemas.format_errors(exc)],
                "quotes": [],
                "searched": False,
                "form_values": form_values,
                "page_title": "Search quotes",
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return render(
        request,
        "quotes/search.html",
        {
            "quotes": crud.search_quotes(db, data.author),
            "searched": True,
            "form_values": form_values,
            "page_title": "Search quotes",
        },
    )
