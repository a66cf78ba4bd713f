"""
Router admin : migrations ponctuelles et supervision des notifications.
"""
import logging

from fastapi import APIRouter, Depends

from config import settings
from core.dependencies import require_admin, get_database, get_notification_store
from models.video import BackfillReport
from services.video_service import backfill_short_ids

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/videos/backfill-short-ids",
    response_model=BackfillReport,
    summary="Migration : dériver short_id des vidéos existantes",
)
async def admin_backfill_short_ids(
    database=Depends(get_database),
    admin: dict = Depends(require_admin),
):
    logger.info(f"Backfill short_id lancé par {admin.get('user_id')}")
    return await backfill_short_ids(database, batch_size=settings.BACKFILL_BATCH_SIZE)


@router.get("/notifications/pending", summary="Notifications non encore envoyées")
async def admin_pending_notifications(
    limit: int = 100,
    store=Depends(get_notification_store),
    _admin=Depends(require_admin),
):
    pending = await store.list_pending(limit=limit)
    return {"notifications": pending, "total": len(pending)}
