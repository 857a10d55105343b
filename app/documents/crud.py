from datetime import datetime, timezone
from typing import List, Optional

from bson.objectid import ObjectId
from pymongo import ASCENDING, DESCENDING


def parse_object_id(value) -> Optional[ObjectId]:
    """Return an ObjectId for `value`, or None when it cannot be one."""
    # ObjectId(None) would mint a fresh id rather than fail
    if value is None or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class DocumentStore:
    """Metadata records for uploaded PDFs, one per GridFS file."""

    def __init__(self, collection):
        self.collection = collection

    async def ensure_indexes(self):
        await self.collection.create_index([("uploaded_at", DESCENDING)])
        await self.collection.create_index([("filename", ASCENDING)])

    async def insert(self, name: str, filename: str, subject: str, file_id,
                     uploaded_at: Optional[datetime] = None) -> dict:
        blob_id = parse_object_id(file_id)
        if blob_id is None:
            raise ValueError(f"file_id must reference a stored blob, got {file_id!r}")

        doc = {
            "name": name,
            "filename": filename,
            "subject": subject,
            "file_id": blob_id,
            "uploaded_at": uploaded_at or datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def list_all(self) -> List[dict]:
        # _id breaks ties between uploads stored within the same millisecond
        cursor = self.collection.find().sort(
            [("uploaded_at", DESCENDING), ("_id", DESCENDING)]
        )
        return await cursor.to_list()

    async def get(self, doc_id) -> Optional[dict]:
        oid = parse_object_id(doc_id)
        if oid is None:
            return None
        return await self.collection.find_one({"_id": oid})

    async def delete(self, doc_id) -> bool:
        oid = parse_object_id(doc_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count == 1

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def exists_filename(self, filename: str) -> bool:
        return await self.collection.find_one({"filename": filename}, {"_id": 1}) is not None
