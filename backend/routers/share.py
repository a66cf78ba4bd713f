"""
Router share : liens courts publics vers les vidéos (sans authentification).
L'app native est redirigée directement, un navigateur reçoit une page d'accueil.
"""
import logging
from html import escape
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import HTMLResponse, RedirectResponse

from config import settings
from core.dependencies import get_database
from core.exceptions import bad_request_exception
from core.utils import detect_client_kind
from models.common import ClientKind
from services.video_service import is_valid_short_id, resolve_short_id

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found_page(short_id: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html lang="fr">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>Vidéo introuvable - SkillConnect</title>
    </head>
    <body>
        <h1>Vidéo introuvable</h1>
        <p>Le lien <code>{escape(short_id)}</code> ne correspond à aucune vidéo.</p>
        <a href="{escape(settings.BASE_URL)}">Découvrir SkillConnect</a>
    </body>
    </html>
    """


def _landing_page(short_id: str, video: dict) -> str:
    title = escape(video.get("title") or "Vidéo SkillConnect")
    video_url = escape(video["video_url"])
    deep_link = escape(f"{settings.APP_DEEP_LINK_SCHEME}://video/{short_id}")
    thumbnail = video.get("thumbnail_url")
    og_image = f'<meta property="og:image" content="{escape(thumbnail)}">' if thumbnail else ""
    return f"""
    <!DOCTYPE html>
    <html lang="fr">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>{title}</title>
        <meta property="og:title" content="{title}">
        <meta property="og:video" content="{video_url}">
        {og_image}
    </head>
    <body>
        <h1>{title}</h1>
        <video src="{video_url}" controls playsinline width="100%"></video>
        <p><a href="{deep_link}">Ouvrir dans l'application</a></p>
        <p>
            <a href="{escape(settings.APP_STORE_URL)}">App Store</a> ·
            <a href="{escape(settings.PLAY_STORE_URL)}">Google Play</a>
        </p>
    </body>
    </html>
    """


@router.get("/{short_id}", summary="Lien court vers une vidéo")
async def open_short_link(
    short_id: str,
    user_agent: Optional[str] = Header(None),
    x_requested_with: Optional[str] = Header(None),
    database=Depends(get_database),
):
    short_id = short_id.strip()
    if not is_valid_short_id(short_id):
        raise bad_request_exception("Identifiant de vidéo invalide")

    video = await resolve_short_id(database, short_id)
    if not video or not video.get("video_url"):
        logger.info(f"Lien court inconnu : {short_id}")
        return HTMLResponse(_not_found_page(short_id), status_code=404)

    if detect_client_kind(user_agent, x_requested_with) == ClientKind.NATIVE_APP:
        return RedirectResponse(video["video_url"], status_code=302)
    return HTMLResponse(_landing_page(short_id, video))
