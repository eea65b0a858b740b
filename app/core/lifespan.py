# app/core/lifespan.py
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from app.db import mongo, redis as r
from app.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Mongo only when it backs the catalog
    if settings.CATALOG_SOURCE == "mongo":
        if not settings.MONGO_URI:
            raise RuntimeError("CATALOG_SOURCE=mongo requires MONGO_URI")
        await mongo.connect()
    else:
        logger.info("Catalog served from file %s", settings.CATALOG_PATH)

    # Redis optional (rate limiting)
    if settings.REDIS_URL:
        await r.connect()
    else:
        logger.warning("No REDIS_URL provided, rate limiting disabled")

    logger.info("%s started env=%s api_prefix=%s", settings.APP_NAME, settings.APP_ENV, settings.api_prefix)

    # Application runs
    yield

    # --- Shutdown ---
    await r.disconnect()
    await mongo.disconnect()
    logger.info("%s stopped", settings.APP_NAME)
