"""
Service vidéo : résolution des liens courts et migration `short_id`.
"""
import logging
import re
from typing import Optional
from urllib.parse import unquote, urlparse

from pymongo import UpdateOne

from models.video import BackfillReport

logger = logging.getLogger(__name__)

SHORT_ID_RE = re.compile(r"^[A-Za-z0-9_]{1,64}$")


def is_valid_short_id(short_id: Optional[str]) -> bool:
    return bool(short_id) and bool(SHORT_ID_RE.match(short_id))


def derive_short_id(video_url: Optional[str]) -> Optional[str]:
    """
    Dérive le short_id depuis le nom du fichier stocké :
    .../videos%2Fa1b2c3-intro.mp4?alt=media → "a1b2c3"
    (dernier segment du chemin, sans extension, avant le premier tiret).
    """
    if not video_url:
        return None
    # Les URLs Firebase Storage encodent le chemin de l'objet (%2F)
    path = unquote(urlparse(video_url).path).rstrip("/")
    filename = path.rsplit("/", 1)[-1]
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    short_id = stem.split("-", 1)[0]
    return short_id if is_valid_short_id(short_id) else None


async def resolve_short_id(database, short_id: str) -> Optional[dict]:
    if not is_valid_short_id(short_id):
        return None
    return await database.videos.find_one({"short_id": short_id}, {"_id": 0})


async def backfill_short_ids(database, batch_size: int = 500) -> BackfillReport:
    """
    Renseigne `short_id` sur toutes les vidéos qui n'en ont pas.
    Idempotent : les vidéos déjà migrées ne sont pas relues.
    """
    report = BackfillReport()
    ops: list[UpdateOne] = []

    async def _flush():
        if not ops:
            return
        result = await database.videos.bulk_write(ops, ordered=False)
        report.updated += result.modified_count
        logger.info(f"Backfill short_id : lot de {len(ops)} vidéo(s) écrit")
        ops.clear()

    # {"short_id": None} couvre aussi les documents sans le champ
    cursor = database.videos.find(
        {"$or": [{"short_id": None}, {"short_id": ""}]},
        {"_id": 1, "video_id": 1, "video_url": 1},
    )
    async for video in cursor:
        report.scanned += 1
        short_id = derive_short_id(video.get("video_url"))
        if not short_id:
            report.skipped += 1
            logger.warning(f"short_id non dérivable pour la vidéo {video.get('video_id')}")
            continue
        ops.append(UpdateOne({"_id": video["_id"]}, {"$set": {"short_id": short_id}}))
        if len(ops) >= batch_size:
            await _flush()
    await _flush()

    logger.info(
        f"Backfill short_id terminé : {report.scanned} lue(s), "
        f"{report.updated} mise(s) à jour, {report.skipped} ignorée(s)"
    )
    return report
