from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from aayutrace.core.config import settings
from aayutrace.core.database import engine, Base, SessionLocal
from aayutrace.middleware.error_handler import register_exception_handlers
from aayutrace.middleware.logging import configure_logging
from aayutrace.services.category_service import CategoryService
from aayutrace.tasks.scheduler import start_scheduler, stop_scheduler, get_scheduler_status
from aayutrace.api.v1 import routers

import aayutrace.models  # noqa: F401

logger = logging.getLogger("aayutrace")


def _seed_default_categories():
    db = SessionLocal()
    try:
        CategoryService(db).ensure_default_categories()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting AayuTrace API...")

    Base.metadata.create_all(bind=engine)
    _seed_default_categories()

    start_scheduler()

    yield

    logger.info("Shutting down AayuTrace API...")
    stop_scheduler()


app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)


origins = settings.ALLOWED_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

for router in routers:
    app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": "AayuTrace API", "version": settings.VERSION, "docs": "/docs"}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "scheduler": get_scheduler_status()}
