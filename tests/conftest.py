"""
Shared fixtures: in-memory stand-ins for the Mongo-backed stores, wired into
a real application through the AppContext.
"""

import secrets
from datetime import datetime, timezone

import pytest
from bson.objectid import ObjectId
from fastapi.testclient import TestClient

from app.admin.sessions import SessionCookie
from app.context import AppContext
from app.documents.crud import parse_object_id
from app.documents.storage import BlobNotFound
from config import Settings
from main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


class FakeDocumentStore:
    def __init__(self):
        self.docs = {}

    async def ensure_indexes(self):
        pass

    async def insert(self, name, filename, subject, file_id, uploaded_at=None):
        if parse_object_id(file_id) is None:
            raise ValueError(f"file_id must reference a stored blob, got {file_id!r}")
        doc = {
            "_id": ObjectId(),
            "name": name,
            "filename": filename,
            "subject": subject,
            "file_id": ObjectId(file_id),
            "uploaded_at": uploaded_at or datetime.now(timezone.utc),
        }
        self.docs[doc["_id"]] = doc
        return dict(doc)

    async def list_all(self):
        ordered = sorted(self.docs.values(), key=lambda d: (d["uploaded_at"], d["_id"]), reverse=True)
        return [dict(d) for d in ordered]

    async def get(self, doc_id):
        doc = self.docs.get(parse_object_id(doc_id))
        return dict(doc) if doc else None

    async def delete(self, doc_id):
        return self.docs.pop(parse_object_id(doc_id), None) is not None

    async def count(self):
        return len(self.docs)

    async def exists_filename(self, filename):
        return any(d["filename"] == filename for d in self.docs.values())


class FakeBlobStore:
    def __init__(self):
        self.blobs = {}

    async def write(self, filename, data, content_type="application/pdf"):
        blob_id = ObjectId()
        self.blobs[blob_id] = bytes(data)
        return blob_id

    async def open(self, blob_id):
        if ObjectId(blob_id) not in self.blobs:
            raise BlobNotFound(str(blob_id))
        data = self.blobs[ObjectId(blob_id)]

        async def chunks():
            for i in range(0, len(data), 16):
                yield data[i:i + 16]

        return chunks()

    async def read(self, blob_id):
        chunks = await self.open(blob_id)
        return b"".join([chunk async for chunk in chunks])

    async def delete(self, blob_id):
        if self.blobs.pop(ObjectId(blob_id), None) is None:
            raise BlobNotFound(str(blob_id))


class FakeSessionStore:
    def __init__(self):
        self.sessions = {}

    async def ensure_indexes(self):
        pass

    async def create(self, data):
        session_id = secrets.token_urlsafe(16)
        self.sessions[session_id] = dict(data)
        return session_id

    async def get(self, session_id):
        return self.sessions.get(session_id)

    async def destroy(self, session_id):
        self.sessions.pop(session_id, None)


@pytest.fixture
def settings():
    return Settings(
        app_env="test",
        session_secret="test-secret",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        max_upload_bytes=4096,
        seed_sample_data=False,
    )


@pytest.fixture
def context(settings):
    return AppContext(
        settings=settings,
        documents=FakeDocumentStore(),
        blobs=FakeBlobStore(),
        sessions=FakeSessionStore(),
        session_cookie=SessionCookie(settings.session_secret),
    )


@pytest.fixture
def app(context):
    return create_app(context)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_client(client):
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.json() == {"success": True}
    return client


def upload(client, name="Notes", subject="Mathematics", filename="notes.pdf",
           data=PDF_BYTES, content_type="application/pdf"):
    return client.post(
        "/api/admin/upload",
        files={"pdf": (filename, data, content_type)},
        data={"name": name, "subject": subject},
    )
