from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    BASE_URL: str = "https://skillconnect.app"

    # MongoDB
    MONGO_URL: str = "mongodb://localhost:27017"
    DB_NAME: str = "SkillConnect"

    # JWT
    JWT_SECRET: str = "changeme_minimum_32_chars_here_please"

    # Firebase (FCM)
    FIREBASE_CREDENTIALS_FILE: Optional[str] = "firebase-service-account.json"
    FCM_ANDROID_CHANNEL_ID: str = "skillconnect_notifications"

    # Watcher de la collection notifications (change stream)
    NOTIFICATION_WATCHER_ENABLED: bool = True
    WATCHER_RETRY_SECONDS: float = 5.0

    # Migration short_id des vidéos
    BACKFILL_BATCH_SIZE: int = 500   # opérations par bulk_write

    # Page de partage vidéo
    APP_DEEP_LINK_SCHEME: str = "skillconnect"
    APP_STORE_URL: str = "https://apps.apple.com/app/skillconnect"
    PLAY_STORE_URL: str = "https://play.google.com/store/apps/details?id=com.skillconnect.app"

    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"],  # cherche dans backend/ puis dans la racine
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
