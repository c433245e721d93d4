import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from . import crud
from .auth import LoginRequired
from .config import DEFAULT_SESSION_SECRET, PACKAGE_DIR, settings
from .csrf import CSRFError
from .database import Base, SessionLocal, engine
from .flash import flash
from .routes import api as api_routes
from .routes import auth as auth_routes
from .routes import home as home_routes
from .routes import profile as profile_routes
from .routes import quotes as quotes_routes
from .routes import wiki as wiki_routes
from .templating import render, templates

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.is_production,
)

settings.upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=PACKAGE_DIR / "static"), name="static")
app.mount("/avatars", StaticFiles(directory=settings.upload_dir), name="avatars")

HOME_PAGE_CONTENT = """# Welcome!

This wiki is written in **Markdown**. Log in to create your own pages.
"""


def _seed_defaults(db: Session) -> None:
    if crud.get_page_by_title(db, "HomePage") is None:
        logger.info("Seeding HomePage")
        crud.create_page(db, title="HomePage", content=HOME_PAGE_CONTENT, is_markdown=True)


@app.on_event("startup")
def on_startup() -> None:
    if settings.is_production and settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning(
            "SESSION_SECRET is not set. Sessions are signed with the public default key."
        )

    Base.metadata.create_all(bind=engine)
    if not settings.seed_demo_content:
        return

    db = SessionLocal()
    try:
        _seed_defaults(db)
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()


def _wants_html(request: Request) -> bool:
    if request.url.path.startswith("/api/"):
        return False
    accept = request.headers.get("accept", "")
    return "text/html" in accept or "*/*" in accept


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    flash(request, str(exc), "danger")
    return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(CSRFError)
async def csrf_error_handler(request: Request, exc: CSRFError):
    if _wants_html(request):
        return render(
            request,
            "errors/generic.html",
            {"detail": str(exc), "status_code": 403, "page_title": "Forbidden"},
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_403_FORBIDDEN)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if not _wants_html(request):
        return JSONResponse(
            {"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers
        )

    if exc.status_code == status.HTTP_404_NOT_FOUND:
        flash(request, "Page doesn't exist", "danger")
        return render(
            request,
            "errors/404.html",
            {
                "detail": exc.detail,
                "url": request.url.path,
                "status_code": exc.status_code,
                "page_title": "Page Not Found",
            },
            status_code=exc.status_code,
        )
    return render(
        request,
        "errors/generic.html",
        {"detail": exc.detail, "status_code": exc.status_code, "page_title": "Error"},
        status_code=exc.status_code,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled application error", exc_info=exc)
    if _wants_html(request):
        return templates.TemplateResponse(
            request,
            "errors/generic.html",
            {"detail": "Internal server error", "status_code": 500},
            status_code=500,
        )
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


app.include_router(home_routes.router)
app.include_router(auth_routes.router)
app.include_router(wiki_routes.router)
app.include_router(profile_routes.router)
app.include_router(quotes_routes.router)
app.include_router(api_routes.router)
