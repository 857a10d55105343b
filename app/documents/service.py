import logging
from typing import AsyncIterator, List, Optional, Tuple

from pymongo.errors import PyMongoError

from app.documents.placeholder import placeholder_pdf
from app.documents.storage import BlobNotFound
from app.documents.uploads import PdfUpload
from app.errors import NotFoundError, ValidationError, storage_errors

logger = logging.getLogger(__name__)


async def _single_chunk(data: bytes) -> AsyncIterator[bytes]:
    yield data


class DocumentService:
    """
    Coordinates the metadata collection and the GridFS bucket.

    Upload writes the blob first and then the record; delete removes the blob
    first and then the record. Neither pair is transactional.
    """

    def __init__(self, documents, blobs):
        self.documents = documents
        self.blobs = blobs

    async def list_documents(self) -> List[dict]:
        with storage_errors("Failed to fetch PDFs"):
            return await self.documents.list_all()

    async def get_document(self, doc_id, failure_message: str = "Failed to fetch PDF") -> dict:
        with storage_errors(failure_message):
            record = await self.documents.get(doc_id)
        if record is None:
            raise NotFoundError("PDF not found")
        return record

    async def upload(self, name: Optional[str], subject: Optional[str],
                     upload: Optional[PdfUpload]) -> dict:
        if upload is None:
            raise ValidationError("No PDF file uploaded")

        name = (name or "").strip()
        subject = (subject or "").strip()
        if not name or not subject:
            raise ValidationError("Name and subject are required")

        with storage_errors("Failed to upload PDF"):
            blob_id = await self.blobs.write(upload.filename, upload.data, upload.content_type)
            try:
                record = await self.documents.insert(
                    name=name,
                    filename=upload.filename,
                    subject=subject,
                    file_id=blob_id,
                )
            except PyMongoError:
                await self._discard_blob(blob_id)
                raise

        logger.info("Uploaded '%s' (%s, %d bytes) as %s",
                    name, upload.filename, len(upload.data), record["_id"])
        return record

    async def _discard_blob(self, blob_id):
        # Best effort: a failure here leaves an orphaned blob, which is logged.
        try:
            await self.blobs.delete(blob_id)
            logger.warning("Removed blob %s after its record could not be saved", blob_id)
        except (BlobNotFound, PyMongoError):
            logger.exception("Could not remove orphaned blob %s", blob_id)

    async def open_document(self, doc_id, failure_message: str = "Failed to fetch PDF"
                            ) -> Tuple[dict, AsyncIterator[bytes]]:
        """
        Return the record and an iterator over its PDF bytes.

        When the GridFS file is missing a generated placeholder PDF describing
        the record is served instead of failing.
        """
        record = await self.get_document(doc_id, failure_message)

        with storage_errors(failure_message):
            try:
                chunks = await self.blobs.open(record["file_id"])
            except BlobNotFound:
                logger.warning("Blob %s for document %s is missing, serving placeholder",
                               record["file_id"], record["_id"])
                chunks = _single_chunk(placeholder_pdf(record["name"], [
                    f"Subject: {record['subject']}",
                    f"File: {record['filename']}",
                    "The original file is not available.",
                ]))
        return record, chunks

    async def delete(self, doc_id) -> dict:
        record = await self.get_document(doc_id, "Failed to delete PDF")

        with storage_errors("Failed to delete PDF"):
            try:
                await self.blobs.delete(record["file_id"])
            except BlobNotFound:
                logger.warning("Blob %s was already gone while deleting document %s",
                               record["file_id"], record["_id"])
            await self.documents.delete(record["_id"])

        logger.info("Deleted document %s (%s)", record["_id"], record["filename"])
        return record
