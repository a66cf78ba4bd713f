"""
Passerelle push : Firebase Cloud Messaging (firebase-admin).
L'app Firebase est initialisée une fois par le point d'entrée (lifespan) puis
injectée dans FcmGateway ; aucun client global n'est créé à l'import.
"""
import asyncio
import json
import logging
import os
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, messaging

from models.notification import DEFAULT_NOTIFICATION_TYPE

logger = logging.getLogger(__name__)


def init_firebase(cred_path: Optional[str] = None) -> firebase_admin.App:
    """
    Initialise Firebase Admin avec le fichier de compte de service s'il existe,
    sinon avec les credentials par défaut (Cloud Run, GCE...).
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if cred_path and os.path.exists(cred_path):
        app = firebase_admin.initialize_app(credentials.Certificate(cred_path))
        logger.info(f"Firebase Admin initialisé depuis {cred_path}")
    else:
        app = firebase_admin.initialize_app()
        logger.info("Firebase Admin initialisé avec les credentials par défaut")
    return app


def _stringify(value: Any) -> str:
    # FCM n'accepte que des valeurs str dans `data`
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def build_data_payload(notification_id: str, notification: dict) -> dict[str, str]:
    """Champs `data` du message : identifiant, type, puis payload auxiliaire tel quel."""
    data = {
        "notificationId": notification_id,
        "type": notification.get("type") or DEFAULT_NOTIFICATION_TYPE,
    }
    data.update(notification.get("data") or {})
    return {str(k): _stringify(v) for k, v in data.items()}


def build_push_message(
    notification_id: str,
    notification: dict,
    token: str,
    channel_id: str,
) -> messaging.Message:
    return messaging.Message(
        token=token,
        notification=messaging.Notification(
            title=notification.get("title"),
            body=notification.get("body"),
        ),
        data=build_data_payload(notification_id, notification),
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                channel_id=channel_id,
                sound="default",
                priority="high",
            ),
        ),
    )


class FcmGateway:
    """Envoi unitaire vers FCM. `messaging.send` est bloquant : exécuté dans un thread."""

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self._app = app

    async def send(self, message: messaging.Message) -> str:
        return await asyncio.to_thread(messaging.send, message, app=self._app)
