"""FastAPI application entrypoint. No business logic; only wiring, middleware and startup."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.database import SessionLocal, init_db
from app.core.sessions import SessionStore
from app.services.errors import ServiceError
from app.services.users import bootstrap_admin_if_absent

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables (if enabled) and seed the admin account before serving."""
    if settings.DB_AUTO_CREATE:
        init_db()
    db = SessionLocal()
    try:
        bootstrap_admin_if_absent(db, settings)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Energy Tracker API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)
app.state.session_store = SessionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render service errors as {"status": "error", "message": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed or missing body fields use the same error envelope as service errors."""
    errors = exc.errors()
    message = "Missing required fields"
    if errors and errors[0].get("type") != "missing":
        field = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
        message = f"Invalid value for '{field}': {errors[0].get('msg', 'invalid')}"
    return JSONResponse(
        status_code=422,
        content={"status": "error", "message": message},
    )


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Energy Tracker API"}
