from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

TAVUS_BASE_URL = "https://tavusapi.com/v2"
CUSTOM_GREETING = "Hey applicant, tell me a little about yourself."
INTERVIEWER_PERSONA = (
    "This is a job interview for an engineer role. Be smug, insulting, and patronising. "
    "Don't ask them follow-up questions. Just bully them a little bit, professionally. "
    "The person you are interviewing has this resume: "
)


class InterviewConfigError(RuntimeError):
    pass


class InterviewUpstreamError(RuntimeError):
    def __init__(self, message: str, *, status_code: int):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class InterviewConfig:
    api_key: str
    replica_id: str
    persona_id: str
    base_url: str
    timeout_s: float


def load_interview_config() -> InterviewConfig:
    api_key = (os.getenv("TAVUS_API_KEY") or "").strip()
    replica_id = (os.getenv("TAVUS_REPLICA_ID") or "").strip()
    persona_id = (os.getenv("TAVUS_PERSONA_ID") or "").strip()
    if not api_key or not replica_id or not persona_id:
        raise InterviewConfigError("Tavus configuration not found")

    try:
        timeout_s = float(os.getenv("TAVUS_TIMEOUT_S", "30"))
    except ValueError:
        timeout_s = 30.0

    return InterviewConfig(
        api_key=api_key,
        replica_id=replica_id,
        persona_id=persona_id,
        base_url=(os.getenv("TAVUS_BASE_URL") or TAVUS_BASE_URL).strip().rstrip("/"),
        timeout_s=timeout_s,
    )


def build_conversation_payload(
    resume_text: str,
    *,
    config: InterviewConfig,
    now_ms: int | None = None,
) -> dict[str, Any]:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return {
        "replica_id": config.replica_id,
        "conversation_name": f"Interview_{stamp}",
        "persona_id": config.persona_id,
        "custom_greeting": CUSTOM_GREETING,
        "conversational_context": f"{INTERVIEWER_PERSONA}{resume_text}",
        "properties": {
            "participant_left_timeout": 0,
            "language": "english",
        },
    }


async def start_interview(resume_text: str, *, transport: httpx.AsyncBaseTransport | None = None) -> dict[str, Any]:
    config = load_interview_config()
    payload = build_conversation_payload(resume_text, config=config)

    async with httpx.AsyncClient(timeout=config.timeout_s, transport=transport) as client:
        response = await client.post(
            f"{config.base_url}/conversations",
            json=payload,
            headers={"x-api-key": config.api_key},
        )

    if response.is_error:
        logger.error(
            "tavus_conversation_failed status=%s body=%s",
            response.status_code,
            response.text[: settings.log_text_preview_chars],
        )
        raise InterviewUpstreamError(
            f"Tavus API error: {response.status_code}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise InterviewUpstreamError("Invalid JSON response from Tavus API", status_code=502) from exc
    if not isinstance(data, dict):
        raise InterviewUpstreamError("Invalid JSON response from Tavus API", status_code=502)

    logger.info("tavus_conversation_started conversation_id=%s", data.get("conversation_id"))
    return data
