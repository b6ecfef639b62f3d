import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from admin_console.config import settings
from admin_console.database import Base, SessionLocal, engine, check_db_connection
import admin_console.models  # noqa: F401  registers models on Base.metadata
from admin_console.services.seed_service import seed_first_admin
from admin_console.utils.exceptions import AppException
from admin_console.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    integrity_error_handler,
    generic_exception_handler,
)

from admin_console.api.v1 import auth
from admin_console.api.v1 import departments
from admin_console.api.v1 import users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
PREFIX = "/api/v1"


# ─── Startup ──────────────────────────────────────────────────────────────────
def on_startup():
    ok = check_db_connection()
    logger.info("DB connected" if ok else "DB connection FAILED")
    if not ok:
        return
    if settings.DATABASE_CREATE_ALL:
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_first_admin(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    on_startup()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=API_VERSION,
        description="User accounts, roles and department budget limits",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ─── Routers ──────────────────────────────────────────────────────────────
    app.include_router(auth.router,        prefix=PREFIX, tags=["Auth"])
    app.include_router(departments.router, prefix=PREFIX, tags=["Departments"])
    app.include_router(users.router,       prefix=PREFIX, tags=["Users"])

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": API_VERSION}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("admin_console.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
