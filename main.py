import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.admin.routes import router as admin_router
from app.context import AppContext, create_context
from app.documents.routes import admin_router as documents_admin_router
from app.documents.routes import router as documents_router
from app.documents.seed import seed_sample_documents
from app.errors import ServiceError
from app.health.routes import router as health_router
from config import Settings, load_settings

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("pdf_management")

PUBLIC_DIR = Path(__file__).resolve().parent / "public"


async def _seed_in_background(context: AppContext):
    try:
        await seed_sample_documents(context.documents, context.blobs)
    except Exception:
        # Nothing awaits this task, so the failure is only visible in the log
        logger.exception("Seeding sample documents failed")


def create_app(context: Optional[AppContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    if context is not None:
        settings = context.settings
    elif settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = app.state.context
        if ctx is None:
            logger.info("Connecting to MongoDB...")
            ctx = app.state.context = create_context(settings)

        try:
            await ctx.ping()
            logger.info("MongoDB connected")
            await ctx.ensure_indexes()
        except PyMongoError as e:
            # Keep serving; requests report the outage as 503 until it recovers.
            logger.error("MongoDB connection failed: %s", e)

        seed_task = None
        if settings.seed_sample_data:
            seed_task = asyncio.create_task(_seed_in_background(ctx))

        logger.info("Server ready on port %s (APP_ENV=%s)", settings.port, settings.app_env)
        try:
            yield
        finally:
            if seed_task is not None and not seed_task.done():
                seed_task.cancel()
            await ctx.close()

    app = FastAPI(title="PDF Management System", lifespan=lifespan)
    app.state.context = context
    app.state.settings = settings

    # ---------------------------
    # ENABLE CORS FOR FRONTEND
    # ---------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request"},
        )

    # ROUTES
    app.include_router(documents_router)
    app.include_router(admin_router)
    app.include_router(documents_admin_router)
    app.include_router(health_router)

    @app.get("/", include_in_schema=False)
    def home():
        return FileResponse(PUBLIC_DIR / "index.html")

    return app


# Run with `uvicorn main:create_app --factory`; settings load when the app is built.
if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=settings.port)
