"""
Service notification : envoi push FCM déclenché par l'écriture d'une notification.

Le dispatcher est rappelé pour CHAQUE écriture sur `notifications`, y compris
celle qu'il fait lui-même pour marquer la notification comme envoyée.
Les deux gardes sur `sent` (après puis avant écriture), complétées par une
relecture du document courant avant envoi, garantissent qu'un même document
ne provoque jamais deux envois lors de rappels successifs.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from config import settings
from models.notification import NotificationCreate, DEFAULT_NOTIFICATION_TYPE
from services.push_gateway import build_push_message

logger = logging.getLogger(__name__)


def _notif_id() -> str:
    return f"ntf_{uuid.uuid4().hex[:12]}"


class NotificationDispatcher:
    def __init__(self, store, gateway, channel_id: Optional[str] = None):
        self.store = store
        self.gateway = gateway
        self.channel_id = channel_id or settings.FCM_ANDROID_CHANNEL_ID

    async def handle_write(self, before: Optional[dict], after: Optional[dict]) -> Optional[str]:
        """
        Traite une écriture (création, mise à jour ou suppression) d'une notification.
        Ne lève jamais : retourne l'id du message FCM si un push est parti, sinon None.
        """
        if not after:
            logger.info("Notification supprimée, rien à envoyer")
            return None

        notif_id = after.get("notif_id")
        if after.get("sent") is True:
            logger.info(f"Notification déjà envoyée, ignorée : {notif_id}")
            return None

        # Image `after` périmée alors que l'écriture sent=True est déjà passée
        if before and before.get("sent") is True:
            logger.info(f"Notification déjà traitée, ignorée : {notif_id}")
            return None

        if not notif_id:
            logger.warning("Notification sans notif_id, impossible de l'acquitter : ignorée")
            return None

        user_id = after.get("user_id")
        try:
            # Les images du change stream datent de l'événement : une réécriture
            # (ex. read_at) faite avant l'acquittement ne porte pas encore sent=True
            current = await self.store.get(notif_id)
            if not current or current.get("sent") is True:
                logger.info(f"Notification déjà traitée ou supprimée, ignorée : {notif_id}")
                return None

            logger.info(f"Traitement nouvelle notification {notif_id} pour {user_id}")

            user = await self.store.get_user(user_id)
            if not user:
                logger.error(f"Utilisateur introuvable : {user_id}")
                # Échec définitif : on marque envoyé pour ne pas réessayer
                await self.store.mark_sent(notif_id)
                return None

            fcm_token = user.get("fcm_token")
            if not fcm_token:
                logger.error(f"Aucun token FCM pour l'utilisateur : {user_id}")
                await self.store.mark_sent(notif_id)
                return None

            message = build_push_message(notif_id, after, fcm_token, self.channel_id)
            response = await self.gateway.send(message)
            logger.info(f"Push FCM envoyé ({notif_id}) : {response}")

            # Déclenche une nouvelle écriture, ignorée grâce à sent=True
            await self.store.mark_sent(notif_id, with_timestamp=True)
            return response
        except Exception as e:
            logger.error(f"Erreur envoi notification {notif_id}: {e}")
            try:
                await self.store.mark_sent(notif_id, error=str(e))
            except Exception as update_error:
                logger.error(f"Impossible de marquer {notif_id} comme envoyée : {update_error}")
            return None


async def create_notification(store, payload: NotificationCreate) -> dict:
    """Insère une notification en attente ; le watcher se charge de l'envoi."""
    notif = {
        "notif_id":   _notif_id(),
        "user_id":    payload.user_id,
        "title":      payload.title,
        "body":       payload.body,
        "type":       payload.type or DEFAULT_NOTIFICATION_TYPE,
        "data":       payload.data,
        "sent":       False,
        "sent_at":    None,
        "error":      None,
        "created_at": datetime.now(timezone.utc),
        "read_at":    None,
    }
    await store.insert(notif)
    logger.info(f"Notification {notif['notif_id']} créée pour {payload.user_id}")
    return notif


async def mark_notification_read(store, notif_id: str) -> bool:
    return await store.update(notif_id, {"read_at": datetime.now(timezone.utc)})
