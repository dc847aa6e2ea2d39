"""FastAPI application exposing account and product endpoints."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List

from fastapi import Depends, FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import Counter
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .auth import get_current_identity
from .config import settings
from .database import init_db
from .exceptions import StorefrontError
from .schemas import (
    Identity,
    ProductCreate,
    ProductCreated,
    ProductOut,
    SessionResponse,
    UserCreate,
    UserLogin,
)
from .security import create_session_token
from .services import authenticate_user, create_product, list_products, register_user


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
app = FastAPI(title=settings.api_title, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Prometheus counter to track API requests by method, endpoint and status code
REQUEST_COUNTER = Counter(
    "api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their outcomes while updating metrics."""
    logger.info("request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        REQUEST_COUNTER.labels(
            method=request.method,
            endpoint=request.url.path,
            status=str(response.status_code),
        ).inc()
        logger.info(
            "response %s %s status %s",
            request.method,
            request.url.path,
            response.status_code,
        )
        return response
    except Exception:
        REQUEST_COUNTER.labels(
            method=request.method,
            endpoint=request.url.path,
            status="500",
        ).inc()
        logger.exception(
            "error handling %s %s", request.method, request.url.path
        )
        raise


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _session_response(user) -> SessionResponse:
    return SessionResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        token=create_session_token(user.id, user.role),
    )


@app.post("/api/register", response_model=SessionResponse)
@limiter.limit(settings.auth_rate_limit)
def register(request: Request, user: UserCreate):
    """Create an account and sign the caller in."""
    db_user = register_user(user.username, user.password, user.role)
    return _session_response(db_user)


@app.post("/api/login", response_model=SessionResponse)
@limiter.limit(settings.auth_rate_limit)
def login(request: Request, user: UserLogin):
    db_user = authenticate_user(user.username, user.password)
    return _session_response(db_user)


@app.get("/api/session", response_model=Identity)
def get_session(identity: Identity = Depends(get_current_identity)):
    """Resolve a session token back to the identity it was issued for."""
    return identity


@app.get("/api/products", response_model=List[ProductOut])
def get_products():
    """Return the whole catalog; filtering is left to the client."""
    return list_products()


@app.post("/api/products", response_model=ProductCreated)
def post_product(payload: ProductCreate):
    """List a product; ``merchantId`` is stored exactly as the client sends it."""
    return create_product(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        image_url=payload.image_url,
        merchant_id=payload.merchant_id,
    )


def mount_frontend(target: FastAPI, static_dir: str | Path) -> bool:
    """Serve a built single-page client from ``static_dir``.

    Files under ``assets/`` are served as-is; every other GET outside
    ``/api`` gets ``index.html`` so the client can route it.
    """
    root = Path(static_dir)
    index = root / "index.html"
    if not index.is_file():
        logger.warning("no built client at %s, static serving disabled", root)
        return False

    assets = root / "assets"
    if assets.is_dir():
        target.mount("/assets", StaticFiles(directory=assets), name="assets")

    @target.get("/{full_path:path}", include_in_schema=False)
    def spa_fallback(full_path: str):
        if full_path.startswith("api/"):
            return JSONResponse(status_code=404, content={"error": "Not found"})
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root.resolve() in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)

    return True


if settings.is_production:
    mount_frontend(app, settings.static_dir)


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("server running on http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
