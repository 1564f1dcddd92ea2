"""
AI Extraction Fallback

Asks Claude to return the report's name, date and strengths as JSON, then
decodes the reply against a pydantic schema. Every failure is reported as an
AIExtractionFailure value; nothing here raises to the caller.

Example Usage:
    extractor = AIExtractor(config.parser)
    result = await extractor.extract(pdf_text)
    if isinstance(result, AIExtractedProfile):
        strengths, descriptions = canonical_strengths(result)
"""

import asyncio
import json
import os
from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from strengths_coach.models.config import ParserConfig
from strengths_coach.models.strength import (
    CANONICAL_STRENGTH_NAMES,
    AdditionalUserInfo,
    ExtractionErrorCode,
)
from strengths_coach.services.strengths_extractor import (
    ExtractedStrength,
    extract_assessment_date,
    is_canonical_strength,
    normalize_strength_name,
)
from strengths_coach.utils.llm_helpers import call_llm, extract_json_from_markdown
from strengths_coach.utils.logger import get_logger
from strengths_coach.utils.prompt_loader import render_prompt

logger = get_logger(
    correlation_id="ai-extractor",
    phase="pdf_parse",
    component="ai_extractor",
)

API_KEY_ENV = "ANTHROPIC_API_KEY"


class AIStrengthItem(BaseModel):
    """One strength as reported by the model."""

    name: str = Field(min_length=1)
    rank: int = Field(ge=1)
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def none_description_to_empty(cls, v: object) -> object:
        return "" if v is None else v


class AIExtractedProfile(BaseModel):
    """Validated shape of the model's extraction JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_name: str = Field(min_length=1)
    assessment_date: Optional[str] = None
    report_type: Optional[str] = None
    strengths: list[AIStrengthItem] = Field(min_length=1)
    additional_info: Optional[AdditionalUserInfo] = None

    @field_validator("user_name")
    @classmethod
    def strip_user_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("userName must not be blank")
        return v


class AIExtractionFailure(BaseModel):
    """Why the AI path produced nothing usable."""

    reason: str
    code: ExtractionErrorCode = ExtractionErrorCode.AI_FALLBACK_UNAVAILABLE


AIExtractionResult = Union[AIExtractedProfile, AIExtractionFailure]


def decode_ai_response(raw: str) -> AIExtractionResult:
    """
    Decode raw model output into a validated profile or a failure.

    Strips markdown fences and surrounding prose, parses JSON, honours an
    explicit ``{"success": false, "error": ...}`` reply and validates the
    schema (non-empty userName, non-empty strengths list).
    """
    json_text = extract_json_from_markdown(raw)
    if not json_text.startswith("{"):
        return AIExtractionFailure(reason="No JSON object found in AI response")

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        return AIExtractionFailure(reason=f"AI response is not valid JSON: {e}")

    if not isinstance(data, dict):
        return AIExtractionFailure(reason="AI response JSON is not an object")

    if data.get("success") is False:
        return AIExtractionFailure(reason=str(data.get("error") or "AI extraction failed"))

    try:
        return AIExtractedProfile.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        return AIExtractionFailure(
            reason=f"AI response failed validation: {', '.join(fields)}"
        )


def canonical_strengths(
    profile: AIExtractedProfile,
) -> tuple[list[ExtractedStrength], dict[str, str]]:
    """
    Keep only canonical strength names from an AI result.

    Names are normalized; unknown names are dropped and duplicates keep the
    best-ranked entry.

    Returns:
        (strengths in rank order, description overrides by canonical name)
    """
    strengths: list[ExtractedStrength] = []
    descriptions: dict[str, str] = {}
    seen: set[str] = set()

    for item in sorted(profile.strengths, key=lambda s: s.rank):
        name = normalize_strength_name(item.name)
        if not is_canonical_strength(name):
            logger.warning("Dropping non-canonical strength from AI result", strength_name=item.name)  # type: ignore[attr-defined]
            continue
        if name in seen:
            continue
        seen.add(name)
        strengths.append(ExtractedStrength(name=name, rank=item.rank))
        if item.description.strip():
            descriptions[name] = item.description.strip()

    return strengths, descriptions


def parse_ai_date(value: Optional[str], today: Optional[date] = None) -> date:
    """Parse the model's date (ISO preferred), falling back to the regex date rules."""
    if value:
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
        return extract_assessment_date(value, today=today)
    return today if today is not None else date.today()


class AIExtractor:
    """Single-attempt, time-bounded Claude extraction of report data."""

    def __init__(self, config: Optional[ParserConfig] = None, model: Optional[str] = None):
        """
        Args:
            config: Parser config (timeout, prompt size, enable flag)
            model: Claude model for extraction (SDK default when None)
        """
        self.config = config or ParserConfig()
        self.model = model

    def is_available(self) -> bool:
        """AI extraction needs the feature flag and an API key."""
        return self.config.ai_fallback_enabled and bool(os.getenv(API_KEY_ENV))

    def build_prompt(self, text: str) -> str:
        """Render the extraction prompt with the report text truncated to ai_max_chars."""
        limit = self.config.ai_max_chars
        return render_prompt(
            "extraction/strengths_extraction.j2",
            pdf_text=text[:limit],
            truncated=len(text) > limit,
            canonical_names=CANONICAL_STRENGTH_NAMES,
        )

    async def extract(
        self, text: str, correlation_id: Optional[str] = None
    ) -> AIExtractionResult:
        """
        Run the AI extraction.

        Args:
            text: Extracted report text
            correlation_id: Optional correlation ID for logging

        Returns:
            AIExtractedProfile on success, AIExtractionFailure otherwise
        """
        log = logger.bind(correlation_id=correlation_id) if correlation_id else logger

        if not self.is_available():
            failure = AIExtractionFailure(reason="AI extraction not available - disabled or API key missing")
            log.info("AI extraction skipped", reason=failure.reason)
            return failure

        prompt = self.build_prompt(text)

        try:
            raw = await asyncio.wait_for(
                call_llm(prompt, model=self.model, correlation_id=correlation_id),
                timeout=self.config.ai_timeout_seconds,
            )
        except asyncio.TimeoutError:
            failure = AIExtractionFailure(
                reason=f"AI extraction timed out after {self.config.ai_timeout_seconds}s"
            )
            log.warning("AI fallback unavailable", reason=failure.reason)
            return failure
        except Exception as e:
            failure = AIExtractionFailure(reason=f"AI extraction failed: {e}")
            log.warning("AI fallback unavailable", reason=failure.reason)
            return failure

        result = decode_ai_response(raw)
        if isinstance(result, AIExtractionFailure):
            log.warning("AI fallback unavailable", reason=result.reason, response=raw)
        else:
            log.info(
                "AI extraction succeeded",
                strength_count=len(result.strengths),
                report_type=result.report_type,
            )
        return result
