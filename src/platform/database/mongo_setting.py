"""
MongoDB connection management

One AsyncMongoClient per process, created lazily and closed from the app
lifespan. Repositories take ``get_database`` as a factory so tests can swap the
whole persistence layer at the DI container instead.
"""

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


BOOKING_COLLECTION = 'bookings'
CART_COLLECTION = 'carts'
VENDOR_COLLECTION = 'vendors'
COUPON_COLLECTION = 'coupons'
USER_COLLECTION = 'users'

_client: AsyncMongoClient | None = None


def get_client() -> AsyncMongoClient:
    global _client
    if _client is None:
        _client = AsyncMongoClient(
            settings.MONGODB_URL,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        )
    return _client


def get_database() -> AsyncDatabase:
    return get_client()[settings.MONGODB_DATABASE]


async def warmup_mongo() -> None:
    """Fail fast on startup and make sure the query indexes exist"""
    database = get_database()
    await database.command('ping')

    bookings = database[BOOKING_COLLECTION]
    await bookings.create_index([('user', ASCENDING), ('createdAt', DESCENDING)])
    await bookings.create_index([('vendor', ASCENDING), ('orderStatus', ASCENDING)])
    await database[CART_COLLECTION].create_index('user')
    await database[COUPON_COLLECTION].create_index([('code', ASCENDING), ('isActive', ASCENDING)])
    Logger.base.info(f'🍃 [MongoDB] Connected to {settings.MONGODB_DATABASE}, indexes ensured')


async def close_mongo() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
        Logger.base.info('🍃 [MongoDB] Client closed')
