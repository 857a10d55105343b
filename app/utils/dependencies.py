from fastapi import Depends, Request

from app.admin.sessions import SESSION_COOKIE, Session
from app.context import AppContext
from app.documents.service import DocumentService
from app.errors import AuthorizationError, storage_errors


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_document_service(context: AppContext = Depends(get_context)) -> DocumentService:
    return context.document_service


async def get_session(request: Request, context: AppContext = Depends(get_context)) -> Session:
    raw = request.cookies.get(SESSION_COOKIE)
    if not raw:
        return Session()

    session_id = context.session_cookie.loads(raw)
    if session_id is None:
        return Session()

    with storage_errors("Failed to read session"):
        data = await context.sessions.get(session_id)
    if data is None:
        return Session()

    return Session(session_id, data)


async def require_admin(session: Session = Depends(get_session)) -> Session:
    if not session.is_admin:
        raise AuthorizationError("Unauthorized")
    return session
