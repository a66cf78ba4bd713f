"""
Accès MongoDB pour les notifications et les profils destinataires.
Toute écriture sur une notification passe par NotificationStore.update(),
qui refuse de repasser `sent` à False.
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class SentFlagError(ValueError):
    """Tentative d'effacer le drapeau `sent` d'une notification."""


def ensure_sent_not_cleared(fields: dict) -> None:
    if "sent" in fields and fields["sent"] is not True:
        raise SentFlagError("Le champ 'sent' ne peut pas revenir à False une fois envoyé")


class NotificationStore:
    def __init__(self, database):
        self._db = database

    async def get_user(self, user_id: str) -> Optional[dict]:
        if not user_id:
            return None
        return await self._db.users.find_one(
            {"user_id": user_id},
            {"_id": 0, "user_id": 1, "fcm_token": 1},
        )

    async def get(self, notif_id: str) -> Optional[dict]:
        return await self._db.notifications.find_one({"notif_id": notif_id}, {"_id": 0})

    async def insert(self, notification: dict) -> None:
        await self._db.notifications.insert_one(dict(notification))

    async def update(self, notif_id: str, fields: dict, server_timestamps: tuple = ()) -> bool:
        """
        $set des champs donnés ; `server_timestamps` liste les champs à dater
        côté serveur via $currentDate.
        """
        ensure_sent_not_cleared(fields)
        update = {"$set": fields}
        if server_timestamps:
            update["$currentDate"] = {name: True for name in server_timestamps}
        result = await self._db.notifications.update_one({"notif_id": notif_id}, update)
        return result.matched_count > 0

    async def mark_sent(
        self,
        notif_id: str,
        *,
        with_timestamp: bool = False,
        error: Optional[str] = None,
    ) -> bool:
        fields = {"sent": True}
        if error is not None:
            fields["error"] = error
        timestamps = ("sent_at",) if with_timestamp else ()
        return await self.update(notif_id, fields, server_timestamps=timestamps)

    async def list_for_user(self, user_id: str, skip: int = 0, limit: int = 50) -> list[dict]:
        cursor = (
            self._db.notifications.find({"user_id": user_id}, {"_id": 0})
            .sort("created_at", -1)
            .skip(skip)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)

    async def list_pending(self, limit: int = 100) -> list[dict]:
        cursor = (
            self._db.notifications.find({"sent": {"$ne": True}}, {"_id": 0})
            .sort("created_at", 1)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)
