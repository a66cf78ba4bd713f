"""
Router users : profil courant et enregistrement du token push.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from core.dependencies import get_current_user, get_database
from models.user import User, FcmTokenUpdate

router = APIRouter()


@router.get("/me", response_model=User, summary="Mon profil")
async def get_me(current_user: dict = Depends(get_current_user)):
    return User(**current_user)


@router.put("/me/fcm-token", summary="Mettre à jour le token FCM (push)")
async def update_fcm_token(
    token_body: FcmTokenUpdate,
    database=Depends(get_database),
    current_user: dict = Depends(get_current_user),
):
    """Enregistre le token Firebase Cloud Messaging de l'appareil."""
    await database.users.update_one(
        {"user_id": current_user["user_id"]},
        {"$set": {"fcm_token": token_body.fcm_token.strip(), "updated_at": datetime.now(timezone.utc)}},
    )
    return {"message": "Token FCM mis à jour"}
