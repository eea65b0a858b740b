from fastapi import FastAPI
from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.lifespan import lifespan
from app.api.v1.routers.compare import router as compare_router
from app.api.v1.routers.products import router as products_router
from app.api.v1.routers.health import router as health_router
from app.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS from env (CSV), e.g. ALLOWED_ORIGINS="https://shop.example.com,https://www.shop.example.com"
allowed_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if allowed_origins else [
        # local frontends when the variable is not set
        "http://localhost:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],               # read-only API
    allow_headers=["*"],
    max_age=86400,
)

# ------- Errors -------
register_exception_handlers(app)

# ------- Routes -------
app.include_router(health_router)
app.include_router(compare_router, prefix=settings.api_prefix)    # before /products/{product_id}
app.include_router(products_router, prefix=settings.api_prefix)
