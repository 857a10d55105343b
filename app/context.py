import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.admin.sessions import SessionCookie, SessionStore
from app.documents.crud import DocumentStore
from app.documents.service import DocumentService
from app.documents.storage import BlobStore
from config import Settings
from db.database import (
    DOCUMENTS_COLLECTION,
    GRIDFS_BUCKET,
    SESSIONS_COLLECTION,
    create_client,
    get_database,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request handler needs, built once at startup."""

    settings: Settings
    documents: Any
    blobs: Any
    sessions: Any
    session_cookie: SessionCookie
    client: Optional[Any] = None

    @property
    def document_service(self) -> DocumentService:
        return DocumentService(self.documents, self.blobs)

    async def ping(self):
        if self.client is not None:
            await self.client.admin.command("ping")

    async def ensure_indexes(self):
        await self.documents.ensure_indexes()
        await self.sessions.ensure_indexes()

    async def close(self):
        if self.client is not None:
            await self.client.close()


def create_context(settings: Settings) -> AppContext:
    client = create_client(settings.mongodb_uri)
    database = get_database(client, settings.database_name)

    context = AppContext(
        settings=settings,
        documents=DocumentStore(database[DOCUMENTS_COLLECTION]),
        blobs=BlobStore.from_database(database, bucket_name=GRIDFS_BUCKET),
        sessions=SessionStore(database[SESSIONS_COLLECTION], settings.session_max_age),
        session_cookie=SessionCookie(settings.session_secret),
        client=client,
    )
    logger.info("GridFS bucket '%s' ready on database '%s'", GRIDFS_BUCKET, settings.database_name)
    return context
