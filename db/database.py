from pymongo import AsyncMongoClient

DOCUMENTS_COLLECTION = "pdfs"
SESSIONS_COLLECTION = "sessions"
GRIDFS_BUCKET = "pdfs"


def create_client(uri: str) -> AsyncMongoClient:
    # The client connects lazily; the first awaited command opens the pool.
    return AsyncMongoClient(uri, serverSelectionTimeoutMS=5000, tz_aware=True)


def get_database(client: AsyncMongoClient, name: str):
    return client[name]
