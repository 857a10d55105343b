import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from itsdangerous import BadSignature, URLSafeSerializer
from pymongo import ASCENDING

SESSION_COOKIE = "pdfms.sid"


class Session:
    """The caller's server-side session; `id` is None when there is none."""

    def __init__(self, id: Optional[str] = None, data: Optional[dict] = None):
        self.id = id
        self.data = data or {}

    @property
    def is_admin(self) -> bool:
        return bool(self.data.get("isAdmin"))


class SessionStore:
    """Session documents keyed by a random token, expired by a TTL index."""

    def __init__(self, collection, max_age: int):
        self.collection = collection
        self.max_age = max_age

    async def ensure_indexes(self):
        await self.collection.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)

    async def create(self, data: dict) -> str:
        now = datetime.now(timezone.utc)
        session_id = secrets.token_urlsafe(32)
        await self.collection.insert_one({
            "_id": session_id,
            "data": data,
            "created_at": now,
            "expires_at": now + timedelta(seconds=self.max_age),
        })
        return session_id

    async def get(self, session_id: str) -> Optional[dict]:
        # The TTL monitor only runs once a minute, so expiry is checked here too
        doc = await self.collection.find_one({
            "_id": session_id,
            "expires_at": {"$gt": datetime.now(timezone.utc)},
        })
        return doc["data"] if doc else None

    async def destroy(self, session_id: str):
        await self.collection.delete_one({"_id": session_id})


class SessionCookie:
    """Signs session ids so a client cannot guess or forge one."""

    def __init__(self, secret: str):
        self.serializer = URLSafeSerializer(secret, salt="admin-session")

    def dumps(self, session_id: str) -> str:
        return self.serializer.dumps(session_id)

    def loads(self, value: str) -> Optional[str]:
        try:
            session_id = self.serializer.loads(value)
        except BadSignature:
            return None
        return session_id if isinstance(session_id, str) else None
