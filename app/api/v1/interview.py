import logging

import httpx
from fastapi import APIRouter, HTTPException, status

from app.schemas.resume import StartInterviewRequest, StartInterviewResponse
from app.services.interview_service import (
    InterviewConfigError,
    InterviewUpstreamError,
    start_interview,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/start-interview", response_model=StartInterviewResponse)
async def start_interview_route(payload: StartInterviewRequest):
    resume_text = (payload.resume_text or "").strip()
    if not resume_text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text is required")

    try:
        conversation = await start_interview(payload.resume_text)
    except InterviewConfigError as exc:
        logger.error("tavus_not_configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except InterviewUpstreamError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        logger.warning("tavus_request_failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start interview",
        ) from exc

    return StartInterviewResponse(conversation=conversation)
