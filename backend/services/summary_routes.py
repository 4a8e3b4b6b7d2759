import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from db import SummaryStore
from models import ErrorResponse, GoogleUser, SummaryRecord, SummaryRequest, SummaryResponse
from services.auth import get_current_user
from services.llm_client import GeminiClient, SummaryGenerationError
from services.summarizer import summarize_text

logger = logging.getLogger(__name__)

# ============================ ROUTER ============================
summary_router = APIRouter(prefix="/api", tags=["Summary"])

# ============================ DEPENDENCIES ============================

def get_llm_client(request: Request) -> GeminiClient:
    return request.app.state.llm_client

def get_summary_store(request: Request) -> SummaryStore:
    return request.app.state.summary_store

def get_max_text_length(request: Request) -> int:
    return request.app.state.settings.max_text_length

# ============================ ROUTES ============================

@summary_router.post(
    "/generate-summary",
    response_model=SummaryResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_summary(
    payload: SummaryRequest,
    user: GoogleUser = Depends(get_current_user),
    llm: GeminiClient = Depends(get_llm_client),
    store: SummaryStore = Depends(get_summary_store),
    max_length: int = Depends(get_max_text_length),
):
    try:
        sent_text, summary = await asyncio.to_thread(
            summarize_text, llm, payload.text, max_length
        )
    except SummaryGenerationError:
        logger.exception("Summary generation error")
        return JSONResponse(status_code=500, content={"error": "Failed to generate summary"})

    store.save_in_background(
        SummaryRecord(
            user_id=user.user_id,
            email=user.email,
            text=sent_text,
            summary=summary,
        )
    )

    return SummaryResponse(summary=summary)
