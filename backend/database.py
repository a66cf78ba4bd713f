import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import IndexModel
from pymongo.errors import OperationFailure
from config import settings

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient = None
_db_instance = None


class _DbProxy:
    """
    Proxy transparent vers l'instance Motor.
    Permet aux services de faire `from database import db` AVANT connect_db().
    db.collection → délégué à _db_instance.collection au moment de l'appel.
    """
    def __getattr__(self, name):
        if _db_instance is None:
            raise RuntimeError("Database not connected. Call connect_db() first.")
        return getattr(_db_instance, name)

    def __getitem__(self, name):
        if _db_instance is None:
            raise RuntimeError("Database not connected. Call connect_db() first.")
        return _db_instance[name]


db = _DbProxy()


def get_db():
    return _db_instance


async def connect_db():
    global client, _db_instance
    client = AsyncIOMotorClient(
        settings.MONGO_URL,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
    )
    _db_instance = client[settings.DB_NAME]
    logger.info(f"Connected to MongoDB: {settings.DB_NAME}")
    try:
        await enable_notification_images()
    except Exception as e:
        logger.warning(f"Could not enable change stream pre-images (non-blocking): {e}")
    try:
        await create_indexes()
    except Exception as e:
        logger.warning(f"Could not create indexes (non-blocking): {e}")


async def close_db():
    global client
    if client:
        client.close()
        logger.info("MongoDB connection closed")


async def enable_notification_images():
    """
    Active les pré/post-images sur `notifications` (MongoDB >= 6.0).
    Sans elles, le change stream ne fournit pas l'état AVANT écriture
    et la garde secondaire du dispatcher ne voit jamais `before`.
    """
    options = {"changeStreamPreAndPostImages": {"enabled": True}}
    try:
        await _db_instance.command("collMod", "notifications", **options)
    except OperationFailure as e:
        if e.code != 26:  # NamespaceNotFound
            raise
        await _db_instance.create_collection("notifications", **options)
    logger.info("Change stream pre/post images enabled on notifications")


async def create_indexes():
    collections_to_index = {
        "users": [
            IndexModel([("user_id", 1)], unique=True),
            IndexModel([("email", 1)], sparse=True),
        ],
        "notifications": [
            IndexModel([("notif_id", 1)], unique=True),
            IndexModel([("user_id", 1)]),
            IndexModel([("sent", 1)]),
            IndexModel([("created_at", 1)]),
        ],
        "videos": [
            IndexModel([("video_id", 1)], unique=True),
            IndexModel([("short_id", 1)]),  # non unique : deux URL peuvent donner le même id
        ],
    }

    for collection_name, index_models in collections_to_index.items():
        try:
            await _db_instance[collection_name].create_indexes(index_models)
            logger.info(f"Indexes created for collection: {collection_name}")
        except Exception as e:
            logger.error(f"Failed to create indexes for collection {collection_name}: {e}")

    logger.info("All MongoDB indexes creation attempts completed.")
