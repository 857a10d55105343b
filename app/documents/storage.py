from typing import AsyncIterator

from bson.objectid import ObjectId
from gridfs import AsyncGridFSBucket
from gridfs.errors import NoFile

from db.database import GRIDFS_BUCKET

PDF_CONTENT_TYPE = "application/pdf"


class BlobNotFound(Exception):
    pass


class BlobStore:
    """
    PDF bytes in a GridFS bucket, addressed by the ObjectId GridFS assigns.

    GridFS does the chunking; this class only turns its calls into single
    awaitables and maps a missing file to BlobNotFound.
    """

    def __init__(self, bucket):
        self.bucket = bucket

    @classmethod
    def from_database(cls, database, bucket_name: str = GRIDFS_BUCKET) -> "BlobStore":
        return cls(AsyncGridFSBucket(database, bucket_name=bucket_name))

    async def write(self, filename: str, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> ObjectId:
        return await self.bucket.upload_from_stream(
            filename,
            data,
            metadata={"contentType": content_type},
        )

    async def open(self, blob_id) -> AsyncIterator[bytes]:
        """
        Open the blob now and return an iterator over its chunks.
        Raises BlobNotFound before anything is streamed.
        """
        try:
            grid_out = await self.bucket.open_download_stream(ObjectId(blob_id))
        except NoFile as e:
            raise BlobNotFound(str(blob_id)) from e
        return self._iter_chunks(grid_out)

    @staticmethod
    async def _iter_chunks(grid_out) -> AsyncIterator[bytes]:
        while True:
            chunk = await grid_out.readchunk()
            if not chunk:
                break
            yield chunk

    async def read(self, blob_id) -> bytes:
        chunks = await self.open(blob_id)
        return b"".join([chunk async for chunk in chunks])

    async def delete(self, blob_id):
        try:
            await self.bucket.delete(ObjectId(blob_id))
        except NoFile as e:
            raise BlobNotFound(str(blob_id)) from e
