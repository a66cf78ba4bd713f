"""
Router notifications : création (producteur) et consultation par le destinataire.
L'envoi push n'est jamais fait ici : le watcher s'en charge après l'insertion.
"""
from fastapi import APIRouter, Depends

from core.dependencies import get_current_user, get_notification_store, require_admin
from core.exceptions import not_found_exception, forbidden_exception
from models.notification import Notification, NotificationCreate
from services.notification_service import create_notification, mark_notification_read

router = APIRouter()


@router.post("", response_model=Notification, status_code=201, summary="Créer une notification")
async def post_notification(
    payload: NotificationCreate,
    store=Depends(get_notification_store),
    _admin=Depends(require_admin),
):
    # Envoi vers un compte arbitraire : réservé aux administrateurs
    return await create_notification(store, payload)


@router.get("/me", summary="Mes notifications")
async def my_notifications(
    skip: int = 0,
    limit: int = 50,
    store=Depends(get_notification_store),
    current_user: dict = Depends(get_current_user),
):
    items = await store.list_for_user(current_user["user_id"], skip=skip, limit=limit)
    return {"notifications": items, "count": len(items)}


@router.put("/{notif_id}/read", summary="Marquer comme lue")
async def read_notification(
    notif_id: str,
    store=Depends(get_notification_store),
    current_user: dict = Depends(get_current_user),
):
    notif = await store.get(notif_id)
    if not notif:
        raise not_found_exception("Notification")
    if notif.get("user_id") != current_user["user_id"]:
        raise forbidden_exception()
    await mark_notification_read(store, notif_id)
    return {"message": "Notification marquée comme lue"}
