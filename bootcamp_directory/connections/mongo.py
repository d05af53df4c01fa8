import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from bootcamp_directory.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo(**overrides) -> None:
    """Register the default connection. Tests pass `mongo_client_class`."""
    options = {"host": settings.mongo_uri, "alias": "default", "tz_aware": True}
    if settings.mongo_srv:
        options["tlsCAFile"] = certifi.where()
    options.update(overrides)
    connect(**options)


def close_mongo() -> None:
    disconnect(alias="default")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    logger.info("Connected to MongoDB database %s", settings.mongo_db)
    try:
        yield
    finally:
        close_mongo()
