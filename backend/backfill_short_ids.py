import asyncio
import os
import sys

# Configuration pour pouvoir importer les modules du backend
sys.path.append(os.path.dirname(os.path.abspath(__file__)))
from config import settings
from database import connect_db, close_db, get_db
from services.video_service import backfill_short_ids


async def run_backfill(batch_size: int):
    """
    Migration ponctuelle : renseigne `short_id` sur les vidéos existantes.
    Peut être relancée sans risque, les vidéos déjà migrées sont ignorées.
    """
    await connect_db()
    try:
        print("\n--- MIGRATION short_id DES VIDÉOS ---")
        report = await backfill_short_ids(get_db(), batch_size=batch_size)
        print(f"📼 {report.scanned} vidéo(s) sans short_id trouvée(s).")
        print(f"✅ {report.updated} vidéo(s) mise(s) à jour.")
        if report.skipped:
            print(f"⚠️ {report.skipped} vidéo(s) ignorée(s) (URL inexploitable).")
    finally:
        await close_db()


if __name__ == "__main__":
    size = int(sys.argv[1]) if len(sys.argv) > 1 else settings.BACKFILL_BATCH_SIZE
    asyncio.run(run_backfill(size))
