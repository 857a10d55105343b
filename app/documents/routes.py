from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from app.context import AppContext
from app.documents.models import serialize_document
from app.documents.service import DocumentService
from app.documents.storage import PDF_CONTENT_TYPE
from app.documents.uploads import form_file, form_text, read_form, read_pdf_upload
from app.errors import ValidationError
from app.utils.dependencies import get_context, get_document_service, require_admin

router = APIRouter(prefix="/api", tags=["Documents"])
admin_router = APIRouter(prefix="/api/admin", tags=["Admin"])


def content_disposition(kind: str, filename: str) -> str:
    """`inline` or `attachment` header value carrying the original filename."""
    ascii_name = "".join(
        ch for ch in filename.encode("ascii", "ignore").decode()
        if ch not in '"\\\r\n'
    ) or "document.pdf"
    value = f'{kind}; filename="{ascii_name}"'
    if ascii_name != filename:
        value += f"; filename*=UTF-8''{quote(filename)}"
    return value


async def _pdf_response(service: DocumentService, doc_id: str, kind: str, failure_message: str):
    record, chunks = await service.open_document(doc_id, failure_message)
    return StreamingResponse(
        chunks,
        media_type=PDF_CONTENT_TYPE,
        headers={"Content-Disposition": content_disposition(kind, record["filename"])},
    )


@router.get("/pdfs")
async def list_pdfs(service: DocumentService = Depends(get_document_service)):
    docs = await service.list_documents()
    return [serialize_document(d) for d in docs]


@router.get("/pdf/{doc_id}/download")
async def download_pdf(doc_id: str, service: DocumentService = Depends(get_document_service)):
    return await _pdf_response(service, doc_id, "attachment", "Failed to download PDF")


@router.get("/pdf/{doc_id}/view")
async def view_pdf(doc_id: str, service: DocumentService = Depends(get_document_service)):
    return await _pdf_response(service, doc_id, "inline", "Failed to view PDF")


@admin_router.post("/upload", dependencies=[Depends(require_admin)])
async def upload_pdf(
    request: Request,
    context: AppContext = Depends(get_context),
    service: DocumentService = Depends(get_document_service),
):
    # The body is only parsed once require_admin has let the request through
    form = await read_form(request)
    try:
        upload = await read_pdf_upload(form_file(form, "pdf"), context.settings.max_upload_bytes)
        record = await service.upload(form_text(form, "name"), form_text(form, "subject"), upload)
    finally:
        await form.close()

    return {
        "success": True,
        "message": "PDF uploaded successfully!",
        "pdf": serialize_document(record),
    }


@admin_router.delete("/pdf/{doc_id}", dependencies=[Depends(require_admin)])
async def delete_pdf(doc_id: str, service: DocumentService = Depends(get_document_service)):
    await service.delete(doc_id)
    return {"success": True, "message": "PDF deleted successfully"}


@admin_router.post("/pdf/{doc_id}", dependencies=[Depends(require_admin)])
async def delete_pdf_from_form(
    doc_id: str,
    request: Request,
    service: DocumentService = Depends(get_document_service),
):
    """Plain HTML forms cannot send DELETE; they post `_method=DELETE` instead."""
    form = await read_form(request)
    method = form_text(form, "_method")
    await form.close()

    if (method or "").upper() != "DELETE":
        raise ValidationError("Unsupported method override")

    await service.delete(doc_id)
    return {"success": True, "message": "PDF deleted successfully"}
