"""
Watcher : change stream MongoDB sur `notifications` → dispatcher.handle_write().
Chaque insert/update/replace/delete est transmis avec ses images avant/après.
"""
import asyncio
import logging
from typing import Optional

from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

WRITE_OPERATIONS = {"insert", "update", "replace", "delete"}


def change_images(change: dict) -> Optional[tuple[Optional[dict], Optional[dict]]]:
    """(before, after) d'un événement de change stream, None si ce n'est pas une écriture."""
    op = change.get("operationType")
    if op not in WRITE_OPERATIONS:
        return None
    before = change.get("fullDocumentBeforeChange")
    after = None if op == "delete" else change.get("fullDocument")
    return before, after


async def dispatch_change(dispatcher, change: dict) -> Optional[str]:
    images = change_images(change)
    if images is None:
        logger.debug(f"Événement ignoré : {change.get('operationType')}")
        return None
    before, after = images
    return await dispatcher.handle_write(before, after)


async def dispatch_pending(dispatcher, limit: int = 1000) -> int:
    """
    Rattrapage : transmet les notifications encore non envoyées, écrites
    pendant que le stream était fermé (arrêt du process, invalidate).
    """
    pending = await dispatcher.store.list_pending(limit=limit)
    for notif in pending:
        await dispatcher.handle_write(None, notif)
    if pending:
        logger.info(f"Rattrapage : {len(pending)} notification(s) en attente transmise(s)")
    return len(pending)


async def watch_notifications(collection, dispatcher, retry_seconds: float = 5.0) -> None:
    """
    Boucle infinie (tâche de fond du lifespan). En cas d'erreur, on rouvre le
    stream après `retry_seconds` en reprenant au dernier resume token. Sans
    token (démarrage, invalidate), les notifications en attente sont rattrapées
    une fois le stream ouvert.
    """
    resume_token = None
    while True:
        try:
            async with collection.watch(
                full_document="whenAvailable",
                full_document_before_change="whenAvailable",
                resume_after=resume_token,
            ) as stream:
                logger.info("Change stream notifications ouvert")
                if resume_token is None:
                    # Le stream est déjà ouvert : rien n'est perdu entre les deux
                    await dispatch_pending(dispatcher)
                async for change in stream:
                    await dispatch_change(dispatcher, change)
                    if change.get("operationType") == "invalidate":
                        resume_token = None
                        break
                    resume_token = stream.resume_token
        except asyncio.CancelledError:
            raise
        except PyMongoError as exc:
            logger.error(f"Change stream notifications interrompu : {exc}")
            await asyncio.sleep(retry_seconds)
        except Exception as exc:
            logger.error(f"Erreur watcher notifications : {exc}")
            await asyncio.sleep(retry_seconds)
