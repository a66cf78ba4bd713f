import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import connect_db, close_db, get_db
from services.notification_service import NotificationDispatcher
from services.notification_store import NotificationStore
from services.notification_watcher import watch_notifications
from services.push_gateway import FcmGateway, init_firebase

# Routers
from routers import admin, notifications, users, share

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_dispatcher(database) -> NotificationDispatcher:
    """Assemble le dispatcher avec ses dépendances (store Mongo + passerelle FCM)."""
    firebase_app = init_firebase(settings.FIREBASE_CREDENTIALS_FILE)
    return NotificationDispatcher(
        store=NotificationStore(database),
        gateway=FcmGateway(firebase_app),
        channel_id=settings.FCM_ANDROID_CHANNEL_ID,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_db()
    task = None
    if settings.NOTIFICATION_WATCHER_ENABLED:
        database = get_db()
        try:
            dispatcher = build_dispatcher(database)
        except Exception as e:
            logger.error(f"Erreur initialisation Firebase Admin, watcher désactivé : {e}")
        else:
            task = asyncio.create_task(
                watch_notifications(database.notifications, dispatcher, settings.WATCHER_RETRY_SECONDS)
            )
    logger.info("SkillConnect API started")
    yield
    # Shutdown
    if task:
        task.cancel()
    await close_db()
    logger.info("SkillConnect API stopped")


app = FastAPI(
    title="SkillConnect API",
    description="Notifications push et liens de partage vidéo",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else [settings.BASE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "app": "skillconnect", "version": "1.0.0"}


# Routers avec auth
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

# Liens courts publics : /{short_id}, inclus en dernier pour ne masquer aucune route
app.include_router(share.router, tags=["Share"])
