import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.context import AppContext
from app.utils.dependencies import get_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
async def health(context: AppContext = Depends(get_context)):
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        await context.ping()
        pdf_count = await context.documents.count()
    except PyMongoError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "ERROR",
                "message": "Database unavailable",
                "database": "disconnected",
                "pdfCount": None,
                "timestamp": timestamp,
            },
        )

    return {
        "status": "OK",
        "message": "PDF Management System is running",
        "database": "connected",
        "pdfCount": pdf_count,
        "timestamp": timestamp,
    }
