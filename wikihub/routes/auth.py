import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..auth import authenticate_user, hash_password
from ..csrf import verify_csrf
from ..database import get_db
from ..flash import flash, login_user, logout_user, store_errors
from ..templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request):
    return render(request, "auth/register.html", {"page_title": "Register"})


@router.post("/register", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
async def register(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    try:
        data = schemas.RegisterForm(
            username=form.get("username") or "",
            password=form.get("password") or "",
        )
    except ValidationError as exc:
        store_errors(request, schemas.format_errors(exc))
        return _redirect("/register")

    try:
        crud.create_user(db, data.username, hash_password(data.password))
    except crud.DuplicateError:
        flash(request, "Username already exists!", "danger")
        return _redirect("/register")
    except crud.StorageError:
        logger.exception("Could not register %s", data.username)
        flash(request, "Registration failed. Please try again.", "danger")
        return _redirect("/register")

    logger.info("Registered user %s", data.username)
    flash(request, "Registration successful! Please log in.", "success")
    return _redirect("/login")


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return render(request, "auth/login.html", {"page_title": "Login"})


@router.post("/login", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
async def login(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    try:
        data = schemas.LoginForm(
            username=form.get("username") or "",
            password=form.get("password") or "",
        )
    except ValidationError as exc:
        store_errors(request, schemas.format_errors(exc))
        return _redirect("/login")

    user = authenticate_user(db, data.username, data.password)
    if not user:
        logger.warning("Failed login for %s", data.username)
        flash(request, "Invalid username or password.", "danger")
        return _redirect("/login")

    login_user(request, user.username)
    logger.info("User %s logged in", user.username)
    flash(request, "Login successful!", "success")
    return _redirect("/")


@router.get("/logout")
def logout(request: Request):
    logout_user(request)
    flash(request, "You have been logged out.", "info")
    return _redirect("/login")
