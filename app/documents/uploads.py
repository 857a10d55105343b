from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException

from app.documents.storage import PDF_CONTENT_TYPE
from app.errors import ValidationError


@dataclass
class PdfUpload:
    filename: str
    content_type: str
    data: bytes


def _format_limit(max_bytes: int) -> str:
    mib = 1024 * 1024
    if max_bytes % mib == 0:
        return f"{max_bytes // mib} MB"
    return f"{max_bytes} bytes"


async def read_form(request: Request) -> FormData:
    """
    Parse the request body as a form. Called from inside handlers so the
    admin gate has already run; a body the parser rejects is a 400.
    """
    try:
        return await request.form()
    except HTTPException as e:
        raise ValidationError(str(e.detail))


def form_text(form: FormData, key: str) -> Optional[str]:
    value = form.get(key)
    return value if isinstance(value, str) else None


def form_file(form: FormData, key: str) -> Optional[UploadFile]:
    value = form.get(key)
    return value if isinstance(value, UploadFile) else None


async def read_pdf_upload(file: Optional[UploadFile], max_bytes: int) -> PdfUpload:
    """
    Pull the uploaded PDF into memory, rejecting anything that is not a PDF
    or is larger than `max_bytes`. Reads at most one byte past the limit.
    """
    if file is None or not file.filename:
        raise ValidationError("No PDF file uploaded")

    if file.content_type != PDF_CONTENT_TYPE:
        raise ValidationError("Only PDF files are allowed")

    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationError(f"File too large (limit is {_format_limit(max_bytes)})")

    return PdfUpload(filename=file.filename, content_type=file.content_type, data=data)
