import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from config import Settings
from db import SummaryStore
from models import HealthResponse
from services.llm_client import GeminiClient, GenerationConfig
from services.summary_routes import summary_router

load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[GeminiClient] = None,
    summary_store: Optional[SummaryStore] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    llm_client = llm_client or GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        generation_config=GenerationConfig(),
        timeout=settings.http_timeout,
    )
    summary_store = summary_store or SummaryStore(
        settings.mongodb_uri,
        db_name=settings.mongodb_db,
        collection=settings.mongodb_collection,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Summary backend starting")
        try:
            yield
        finally:
            app.state.summary_store.close()
            logger.info("Summary backend stopped")

    app = FastAPI(title="AI Summary Backend", lifespan=lifespan)
    app.state.settings = settings
    app.state.llm_client = llm_client
    app.state.summary_store = summary_store

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.allowed_origin_regex,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # ============================ ERRORS ============================
    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body: %s", exc.errors())
        # Malformed JSON fails before the auth dependency runs.
        if not request.headers.get("authorization"):
            return JSONResponse(status_code=401, content={"error": "No authorization header"})
        return JSONResponse(status_code=500, content={"error": "Failed to generate summary"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Failed to generate summary"})

    # ============================ HEALTH CHECK ============================
    @app.get("/api/health", response_model=HealthResponse)
    def health_check():
        return {"status": "ok"}

    app.include_router(summary_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
