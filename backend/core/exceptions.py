from fastapi import HTTPException, status


def credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Session SkillConnect invalide ou expirée, reconnectez-vous",
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden_exception(detail: str = "Action non autorisée pour ce compte") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def not_found_exception(resource: str = "Élément") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource} inexistant(e) ou supprimé(e)",
    )


def bad_request_exception(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
