from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sse_starlette.sse import EventSourceResponse
import asyncio
import json
import logging

from aayutrace.core.config import settings
from aayutrace.core.database import SessionLocal
from aayutrace.core.dependencies import get_stream_user
from aayutrace.models.user import User
from aayutrace.services.notification_service import NotificationFeed, NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["Real-time"])


def _fetch_feed(user_id: int) -> NotificationFeed:
    db = SessionLocal()
    try:
        return NotificationService(db).fetch_recent(user_id)
    finally:
        db.close()


@router.get("/notifications")
async def stream_notifications(
    request: Request, current_user: User = Depends(get_stream_user)
):
    """
    Flux SSE des notifications de l'utilisateur

    Chaque événement transporte un instantané complet (refetch) ; le
    premier est envoyé dès la connexion, ce qui resynchronise un client
    après reconnexion.
    """
    user_id = current_user.id

    async def event_generator():
        last_signature = None

        while True:
            if await request.is_disconnected():
                logger.debug(f"Notification stream closed for user {user_id}")
                break

            try:
                feed = await run_in_threadpool(_fetch_feed, user_id)
            except SQLAlchemyError as e:
                logger.warning(f"Notification stream refetch failed for user {user_id}: {e}")
                await asyncio.sleep(settings.REALTIME_POLL_SECONDS)
                continue

            signature = feed.signature()
            if signature != last_signature:
                last_signature = signature
                yield {"event": "notifications", "data": json.dumps(feed.to_dict())}

            await asyncio.sleep(settings.REALTIME_POLL_SECONDS)

    return EventSourceResponse(event_generator())
