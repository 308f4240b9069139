from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.db.base import SessionLocal, get_db
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.routers import badges as badges_router
from app.routers import questions as questions_router
from app.services.catalog import seed_default_badges
from app.core.errors import (
    AskBuddyException,
    askbuddy_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SEED_BADGES_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_default_badges(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title="AskMeBuddy API",
    description=(
        "**Question history and badge rewards for AskMeBuddy**\n\n"
        "Records answered questions, classifies them by topic and unlocks "
        "badges through a tiered achievement engine.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(AskBuddyException, askbuddy_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(questions_router.router)
app.include_router(badges_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
