from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db
from ..templating import render

router = APIRouter(tags=["home"])


@router.get("/", response_class=HTMLResponse)
def index(request: Request, db: Session = Depends(get_db)):
    return render(
        request,
        "index.html",
        {"pages": crud.get_recent_pages(db), "page_title": "Home"},
    )
