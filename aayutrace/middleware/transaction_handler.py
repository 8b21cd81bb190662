from sqlalchemy.orm import Session
from functools import wraps
import logging

from aayutrace.utils.exceptions import (
    StaleReferenceError,
    CategoryInUseError,
    AlreadyInFamilyError,
    FamilyPermissionError,
)

logger = logging.getLogger(__name__)

# Refus métier : rollback silencieux, l'appelant reçoit une 4xx
DOMAIN_ERRORS = (
    StaleReferenceError,
    CategoryInUseError,
    AlreadyInFamilyError,
    FamilyPermissionError,
    ValueError,
)


def transactional(func):
    """
    Une méthode de service = une unité de travail sur `self.db`

    Commit si la méthode se termine, sinon rollback et l'exception remonte
    telle quelle. Les refus métier sont journalisés en warning, les erreurs
    du datastore en error avec la trace.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        db: Session = self.db
        try:
            result = func(self, *args, **kwargs)
            db.commit()
        except DOMAIN_ERRORS as e:
            db.rollback()
            logger.warning(f"{type(self).__name__}.{func.__name__} refused: {e}")
            raise
        except Exception as e:
            db.rollback()
            logger.error(
                f"Transaction failed in {type(self).__name__}.{func.__name__}: {e}",
                exc_info=True,
            )
            raise

        logger.debug(f"Transaction committed in {type(self).__name__}.{func.__name__}")
        return result

    return wrapper
