from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

AnalysisSource = Literal["ai", "fallback"]


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _to_text(value: Any) -> str | None:
    """Flatten whatever the model put in a text slot into a string.

    Bullet lists are joined one per line, objects are kept as JSON.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        parts = [_to_text(item) for item in value]
        return "\n".join(part for part in parts if part)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _wrap_text_item(value: Any, key: str) -> Any:
    if isinstance(value, (dict, BaseModel)):
        return value
    return {key: value}


class ExperienceItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    company: str | None = None
    position: str | None = None
    duration: str | None = None
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _bare_text(cls, data: Any) -> Any:
        return _wrap_text_item(data, "description")

    @field_validator("company", "position", "duration", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _to_text(value)


class EducationItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    institution: str | None = None
    degree: str | None = None
    year: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _bare_text(cls, data: Any) -> Any:
        return _wrap_text_item(data, "institution")

    @field_validator("institution", "degree", "year", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _to_text(value)


class HonestEntry(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    role_title: str | None = Field(default=None, alias="Role Title")
    company: str | None = Field(default=None, alias="Company")
    description: str | None = Field(default=None, alias="Description")

    @model_validator(mode="before")
    @classmethod
    def _bare_text(cls, data: Any) -> Any:
        return _wrap_text_item(data, "Description")

    @field_validator("role_title", "company", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _to_text(value)


class HonestReview(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    experience: list[HonestEntry] = Field(default_factory=list, alias="Experience")
    projects_and_awards: list[HonestEntry] = Field(default_factory=list, alias="ProjectsAndAwards")

    @field_validator("experience", "projects_and_awards", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return _as_list(value)


class ParsedResume(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    summary: str | None = None
    experience: list[ExperienceItem] = Field(default_factory=list)
    education: list[EducationItem] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    @field_validator("experience", "education", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        skills = [_to_text(item) for item in _as_list(value)]
        return [skill.strip() for skill in skills if skill and skill.strip()]

    @field_validator("name", "email", "phone", "summary", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _to_text(value)


class ResumeAnalysis(ParsedResume):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    raw_text: str = Field(default="", alias="rawText")
    honest_review: HonestReview = Field(default_factory=HonestReview, alias="honestReview")
    source: AnalysisSource = "ai"


class ParseResumeResponse(BaseModel):
    success: bool = True
    data: dict[str, Any]


class StartInterviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_text: str | None = Field(default=None, alias="resumeText")
    parsed_data: dict[str, Any] | None = Field(default=None, alias="parsedData")


class StartInterviewResponse(BaseModel):
    success: bool = True
    conversation: dict[str, Any]
