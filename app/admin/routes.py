import logging
import secrets

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from app.admin.sessions import SESSION_COOKIE, Session
from app.context import AppContext
from app.errors import ValidationError, storage_errors
from app.utils.dependencies import get_context, get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


class LoginSchema(BaseModel):
    email: str = ""
    password: str = ""


async def _read_credentials(request: Request) -> LoginSchema:
    # The front-end posts JSON; plain HTML forms post urlencoded fields.
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError("Invalid request body")
    else:
        payload = dict(await request.form())

    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")

    return LoginSchema(
        email=str(payload.get("email") or ""),
        password=str(payload.get("password") or ""),
    )


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


@router.post("/login")
async def login(
    request: Request,
    response: Response,
    session: Session = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    credentials = await _read_credentials(request)
    settings = context.settings

    email_ok = _matches(credentials.email, settings.admin_email)
    password_ok = _matches(credentials.password, settings.admin_password)
    if not (email_ok and password_ok):
        logger.warning("Failed admin login for '%s'", credentials.email)
        return {"success": False, "error": "Invalid credentials"}

    with storage_errors("Failed to create session"):
        if session.id is not None:
            await context.sessions.destroy(session.id)
        session_id = await context.sessions.create({"isAdmin": True})

    response.set_cookie(
        SESSION_COOKIE,
        context.session_cookie.dumps(session_id),
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    logger.info("Admin logged in")
    return {"success": True}


@router.get("/check")
async def check(session: Session = Depends(get_session)):
    return {"isAdmin": session.is_admin}


@router.post("/logout")
async def logout(
    response: Response,
    session: Session = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    if session.id is not None:
        with storage_errors("Failed to end session"):
            await context.sessions.destroy(session.id)

    response.delete_cookie(SESSION_COOKIE)
    return {"success": True}
