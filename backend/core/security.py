from typing import Optional

from jose import jwt, JWTError

from config import settings

# ── JWT ───────────────────────────────────────────────────────────────────────
# Les tokens sont émis par le service d'authentification de l'app ;
# ce backend ne fait que les vérifier.
ALGORITHM = "HS256"


def decode_token(token: str) -> dict:
    """Lève JWTError si invalide ou expiré."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])


def verify_access_token(token: str) -> Optional[dict]:
    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            return None
        return payload
    except JWTError:
        return None
