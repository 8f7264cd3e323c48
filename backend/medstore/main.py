"""
MedStore Backend: billing and inventory admin API for a group of medical stores.

ARCHITECTURE:
- FastAPI backend: REST routes per resource under /api
- SQLAlchemy: persistence (SQLite by default)
- Single-page admin front end: talks to this API with a bearer token

ACCESS MODEL:
- Admin: every store, every record, user management
- Store user: own store only; may dispense (create billings), not edit stock
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medstore.api.routes import auth, stores, medicines, billings, users
from medstore.core.config import settings
from medstore.core.exceptions import BusinessError
from medstore.db.init_db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create tables and make sure an admin account exists.
    A failing database is fatal; the server must not start without it.
    """
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="MedStore API",
    description="Stores, medicines, prescriptions and users for medical-store billing.",
    version="0.1.0",
    lifespan=lifespan,
)

# Front end may be hosted anywhere; auth is by bearer token, not cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


def _describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        # Drop the "body"/"path" prefix from the location
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        msg = error.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{field}: {msg}" if field else msg)
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed fields are a 400 with a readable message."""
    error = BusinessError.bad_request(_describe_validation_error(exc))
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    error = BusinessError.server_error(exc)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(stores.router, prefix="/api/stores", tags=["stores"])
app.include_router(medicines.router, prefix="/api/medicines", tags=["medicines"])
app.include_router(billings.router, prefix="/api/billings", tags=["billings"])
app.include_router(users.router, prefix="/api/users", tags=["users"])


@app.get("/")
def root():
    return {"message": "MedStore API is running"}


@app.get("/health")
def health():
    return {"status": "ok"}
