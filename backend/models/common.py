from enum import Enum


class UserRole(str, Enum):
    CLIENT = "client"
    ADMIN  = "admin"


class ClientKind(str, Enum):
    """Type d'appelant détecté sur les liens de partage."""
    NATIVE_APP = "native_app"
    BROWSER    = "browser"
