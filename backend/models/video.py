from pydantic import BaseModel


# Documents `videos` : video_id, video_url, short_id (dérivé une fois du nom
# de fichier), title, thumbnail_url, created_at.
class BackfillReport(BaseModel):
    scanned: int = 0
    updated: int = 0
    skipped: int = 0
