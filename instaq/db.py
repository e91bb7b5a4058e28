"""MongoDB connection and Beanie document registration."""
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from instaq.config import settings
from instaq.models import AttendanceRecord, User

DOCUMENT_MODELS = [User, AttendanceRecord]

_client = None


def create_client():
    return AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=5000)


async def db_startup():
    """Connect to MongoDB and initialize Beanie ODM."""
    global _client
    _client = create_client()
    await init_beanie(database=_client[settings.mongodb_db_name], document_models=DOCUMENT_MODELS)


async def db_shutdown():
    """Close MongoDB connection."""
    global _client
    if _client:
        _client.close()
        _client = None


async def init_db():
    await db_startup()
