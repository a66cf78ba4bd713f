from typing import Optional

from models.common import ClientKind

# Fragments de User-Agent envoyés par l'app mobile (Flutter/Dart, OkHttp, iOS)
NATIVE_AGENT_MARKERS = ("skillconnect/", "dart/", "okhttp", "cfnetwork")
APP_PACKAGE = "com.skillconnect.app"


def detect_client_kind(user_agent: Optional[str], requested_with: Optional[str] = None) -> ClientKind:
    """
    Distingue l'app native d'un navigateur.
    Les WebViews Android envoient X-Requested-With avec le package de l'app.
    """
    if requested_with and requested_with.strip().lower() == APP_PACKAGE:
        return ClientKind.NATIVE_APP
    ua = (user_agent or "").lower()
    if any(marker in ua for marker in NATIVE_AGENT_MARKERS):
        return ClientKind.NATIVE_APP
    return ClientKind.BROWSER
