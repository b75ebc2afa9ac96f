from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any

from app.ai.factory import get_ai_client
from app.ai.types import AIClient, ChatMessage
from app.schemas.resume import HonestReview, ResumeAnalysis
from app.services.llm_json import parse_json_content

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Unable to parse with AI - please check manually"

NAME_RE = re.compile(r"([A-Z][a-z]+ [A-Z][a-z]+)")
EMAIL_RE = re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
PHONE_RE = re.compile(r"(\+?\d{1,3}[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4})")

STRUCTURED_PROMPT = """Parse this resume text and extract the following information in JSON format:
{{
  "name": "Full name",
  "email": "Email address",
  "phone": "Phone number",
  "summary": "Professional summary or objective",
  "experience": [
    {{
      "company": "Company name",
      "position": "Job title",
      "duration": "Employment duration",
      "description": "Job description"
    }}
  ],
  "education": [
    {{
      "institution": "School/University name",
      "degree": "Degree/certification",
      "year": "Graduation year"
    }}
  ],
  "skills": ["skill1", "skill2", "skill3"]
}}

Resume text:
{text}

Please extract the information and return ONLY the JSON object, no additional text."""

HONEST_REVIEW_PROMPT = """You are the vile and honest resume reviewer. People give you a resume, and you must return the same resume, except with each description as an insulting, funny, but most importantly honest version. Roast what the person did and claims, never who they are. For example, if someone claims to have built a "Revolutionary AI startup", you'll replace that with the fact that its nothing more than a GPT wrapper. You will return a json table with the following keys: Experience, ProjectsAndAwards. each entry should be a list of json tables with the Role Title, Company, and Description.

Resume text:
{text}

Return ONLY the JSON object with the honest review, no additional text."""


def build_structured_prompt(text: str) -> str:
    return STRUCTURED_PROMPT.format(text=text)


def build_honest_review_prompt(text: str) -> str:
    return HONEST_REVIEW_PROMPT.format(text=text)


async def _json_completion(client: AIClient, prompt: str, *, task: str) -> dict[str, Any]:
    started = time.perf_counter()
    content = await client.complete([ChatMessage(role="user", content=prompt)])
    logger.info(
        "resume_llm_completed task=%s response_len=%s latency_ms=%s",
        task,
        len(content),
        int((time.perf_counter() - started) * 1000),
    )
    return parse_json_content(content)


async def parse_resume_with_ai(text: str, client: AIClient) -> dict[str, Any]:
    return await _json_completion(client, build_structured_prompt(text), task="structured")


async def honest_resume_review(text: str, client: AIClient) -> dict[str, Any]:
    return await _json_completion(client, build_honest_review_prompt(text), task="honest_review")


def extract_basic_info(text: str, pattern: re.Pattern[str]) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None


def fallback_resume_data(text: str) -> ResumeAnalysis:
    return ResumeAnalysis(
        name=extract_basic_info(text, NAME_RE),
        email=extract_basic_info(text, EMAIL_RE),
        phone=extract_basic_info(text, PHONE_RE),
        summary=FALLBACK_SUMMARY,
        experience=[],
        education=[],
        skills=[],
        raw_text=text,
        honest_review=HonestReview(),
        source="fallback",
    )


def build_analysis(parsed: dict[str, Any], review: dict[str, Any], text: str) -> ResumeAnalysis:
    # Model-provided keys never override the fields we own.
    payload = {
        key: value
        for key, value in parsed.items()
        if key not in {"rawText", "honestReview", "source", "raw_text", "honest_review"}
    }
    return ResumeAnalysis.model_validate(
        {
            **payload,
            "rawText": text,
            "honestReview": HonestReview.model_validate(review),
            "source": "ai",
        }
    )


async def analyze_resume(text: str, client: AIClient | None = None) -> ResumeAnalysis:
    """Run structured extraction and the honest review side by side.

    Any failure on the AI path (missing key, upstream error, unparseable
    reply) degrades to the regex fallback instead of failing the request.
    When one call fails the other is cancelled before we return.
    """
    try:
        ai_client = client or get_ai_client()
        async with asyncio.TaskGroup() as group:
            parsed_task = group.create_task(parse_resume_with_ai(text, ai_client))
            review_task = group.create_task(honest_resume_review(text, ai_client))
        return build_analysis(parsed_task.result(), review_task.result(), text)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("resume_ai_failed_using_fallback text_len=%s: %s", len(text), exc)
        return fallback_resume_data(text)
