from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field

# Helper to convert MongoDB ObjectId to string for JSON responses
PyObjectId = Annotated[str, BeforeValidator(str)]


class DocumentModel(BaseModel):
    """
    One uploaded PDF as the front-end sees it.
    Stored with snake_case keys, served with the wire names below.
    """
    id: PyObjectId = Field(alias="_id")
    name: str
    filename: str
    subject: str

    # Points to the GridFS file holding the bytes
    file_id: PyObjectId = Field(alias="fileId")

    uploaded_at: datetime = Field(
        alias="uploadDate",
        default_factory=lambda: datetime.now(timezone.utc),
    )

    class Config:
        populate_by_name = True


def serialize_document(record: dict) -> dict:
    return DocumentModel(**record).model_dump(mode="json", by_alias=True)
