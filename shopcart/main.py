# shopcart/main.py
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from shopcart.api.error_handlers import register_exception_handlers
from shopcart.api.routers import cart, products
from shopcart.core.config import settings
from shopcart.core.logging import setup_logging
from shopcart.core.metrics import export_metrics
from shopcart.middleware import ObservabilityMiddleware, PayloadLimitMiddleware

# --- Models registration (needed so Alembic sees them) ---
import shopcart.models.product  # noqa: F401
import shopcart.models.cart     # noqa: F401

setup_logging()

TAGS_METADATA = [
    {"name": "cart", "description": "Session-bound shopping cart."},
    {"name": "products", "description": "Product catalogue read by the cart."},
]

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    description=(
        "Anonymous shopping carts bound to a signed session cookie.\n\n"
        "- **Cart**: add, shift and remove line items; totals are always recomputed.\n"
        "- **Products**: minimal catalogue the cart prices against.\n\n"
        "Inactive carts are marked abandoned and later purged by the `carts.sweep` Celery task."
    ),
    openapi_tags=TAGS_METADATA,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# --- Middlewares (the last one added wraps the others) ---
app.add_middleware(ObservabilityMiddleware)
app.add_middleware(PayloadLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    https_only=settings.SESSION_HTTPS_ONLY,
    same_site="lax",
)

register_exception_handlers(app)

# --- Routers ---
app.include_router(cart.router, prefix=settings.API_V1_STR)
app.include_router(products.router, prefix=settings.API_V1_STR)


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    payload, content_type = export_metrics()
    return Response(content=payload, media_type=content_type)


@app.get("/", include_in_schema=False)
def root():
    return {"status": "ok", "docs_url": "/docs", "redoc_url": "/redoc"}
