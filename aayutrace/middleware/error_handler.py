from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
import logging

from aayutrace.utils.exceptions import (
    StaleReferenceError,
    CategoryInUseError,
    AlreadyInFamilyError,
    FamilyPermissionError,
)

logger = logging.getLogger(__name__)


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Erreurs du datastore : jamais fatales, toujours réessayables"""

    if isinstance(exc, IntegrityError):
        logger.error(f"Database Integrity Error: {exc.orig}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": "Database integrity error: A resource with these attributes already exists or is linked improperly."
            },
        )

    if isinstance(exc, OperationalError):
        logger.critical(f"Database unavailable: {exc}", exc_info=True)
    else:
        logger.error(f"Database error: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "The data store is temporarily unavailable. Please retry.",
            "retryable": True,
        },
    )


async def stale_reference_handler(request: Request, exc: StaleReferenceError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "stale_reference",
            "entity": exc.entity,
            "message": f"{exc.reason}. Please refresh and try again.",
        },
    )


async def category_in_use_handler(request: Request, exc: CategoryInUseError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "category_in_use",
            "message": "This category is being used by one or more products. "
            "Please update or delete those products first.",
            "product_count": exc.product_count,
        },
    )


async def already_in_family_handler(request: Request, exc: AlreadyInFamilyError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "already_in_family",
            "message": "You are already a member of a family. "
            "Please leave your current family first.",
        },
    )


async def family_permission_handler(request: Request, exc: FamilyPermissionError):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={
            "error": "family_permission_denied",
            "message": f"Only family owners and admins can {exc.action}.",
        },
    )


async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


def register_exception_handlers(app):
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(StaleReferenceError, stale_reference_handler)
    app.add_exception_handler(CategoryInUseError, category_in_use_handler)
    app.add_exception_handler(AlreadyInFamilyError, already_in_family_handler)
    app.add_exception_handler(FamilyPermissionError, family_permission_handler)
    app.add_exception_handler(ValueError, value_error_handler)
