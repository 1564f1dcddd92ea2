"""
Claude Coaching Service

Strengths-based coaching conversations and profile analysis on top of a
parsed UserProfile. Requests are rate limited per client by an injected
RequestRateLimiter; Claude errors surface as ServiceError.

Example Usage:
    limiter = RequestRateLimiter.from_config(params.rate_limits)
    service = ClaudeCoachingService(params.coaching, limiter)
    reply = await service.generate_coaching_response(
        CoachingRequest(message="How do I lead with Strategic?", strengths_profile=profile)
    )
"""

import asyncio
import json
import random
import re
import string
import time
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from claude_agent_sdk import CLIJSONDecodeError, CLINotFoundError
from pydantic import ValidationError

from strengths_coach.models.coaching import (
    AnalysisPayload,
    AnalysisResponse,
    CoachingRequest,
    CoachingResponse,
    DomainAnalysis,
    ServiceError,
    StrengthInsight,
)
from strengths_coach.models.config import CoachingConfig
from strengths_coach.models.strength import StrengthDomain, UserProfile
from strengths_coach.utils.llm_helpers import (
    call_llm_with_retry,
    extract_json_from_markdown,
    stream_llm,
)
from strengths_coach.utils.logger import get_logger
from strengths_coach.utils.prompt_loader import get_system_prompt, render_prompt
from strengths_coach.utils.rate_limiter import RequestRateLimiter

logger = get_logger(
    correlation_id="coaching-service",
    phase="coaching",
    component="coaching_service",
)

MAX_SUGGESTIONS = 5
MAX_FOLLOW_UP_QUESTIONS = 3
MIN_QUESTION_LENGTH = 10

LEADERSHIP_STYLES = {
    StrengthDomain.EXECUTING: "Task-oriented leadership focused on getting things done",
    StrengthDomain.INFLUENCING: "Inspirational leadership that motivates and directs others",
    StrengthDomain.RELATIONSHIP_BUILDING: "People-focused leadership that builds strong teams",
    StrengthDomain.STRATEGIC_THINKING: "Visionary leadership that provides direction and focus",
}

_BRACKETED = re.compile(r"\[.*?\]", re.DOTALL)
_STRATEGY_LINE = re.compile(
    r"^(?:This response aims to|I'm keeping|My approach here|The strategy is).*$",
    re.MULTILINE,
)
_BLANK_RUN = re.compile(r"\n\s*\n\s*\n")
_LIST_ITEM = re.compile(r"^(?:[-*•]|\d+\.)\s+")
_LIST_PREFIX = re.compile(r"^[-*•\d.\s]+")


def clean_coaching_response(response: str) -> str:
    """Remove bracketed meta-commentary, strategy lines and blank-line runs."""
    cleaned = _BRACKETED.sub("", response)
    cleaned = _STRATEGY_LINE.sub("", cleaned)
    cleaned = _BLANK_RUN.sub("\n\n", cleaned)
    return cleaned.strip()


def extract_suggestions(response: str) -> list[str]:
    """Collect up to 5 bullet or numbered list items."""
    suggestions = []
    for line in response.splitlines():
        trimmed = line.strip()
        if _LIST_ITEM.match(trimmed):
            suggestion = _LIST_PREFIX.sub("", trimmed).strip()
            if suggestion:
                suggestions.append(suggestion)
    return suggestions[:MAX_SUGGESTIONS]


def extract_follow_up_questions(response: str) -> list[str]:
    """Collect up to 3 lines that end in a question mark."""
    questions = [
        line.strip()
        for line in response.splitlines()
        if line.strip().endswith("?") and len(line.strip()) > MIN_QUESTION_LENGTH
    ]
    return questions[:MAX_FOLLOW_UP_QUESTIONS]


def generate_session_id() -> str:
    """Session ids look like ``session_<epoch ms>_<random>``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=13))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def default_strength_insights(profile: UserProfile) -> list[StrengthInsight]:
    """Template insights for the top 5 when the model's analysis is unusable."""
    return [
        StrengthInsight(
            name=s.name,
            rank=s.rank,
            domain=s.domain,
            personalized_description=s.description
            or f"Your {s.name} strength is in the {s.domain.value} domain.",
            leverage_strategy=f"Focus on applying your {s.name} strength in your daily activities.",
            potential_blind_spots=[
                f"Overusing {s.name} without considering other perspectives."
            ],
        )
        for s in profile.top_five
    ]


def domain_analysis(profile: UserProfile) -> list[DomainAnalysis]:
    """Share of the profile in each domain with its leadership style."""
    total = len(profile.strengths)
    return [
        DomainAnalysis(
            domain=summary.domain,
            strength_count=summary.count,
            percentage=summary.count / total * 100 if total else 0.0,
            insights=f"You have {summary.count} strengths in the {summary.domain.value} domain.",
            leadership_style=LEADERSHIP_STYLES.get(summary.domain, "Balanced leadership approach"),
        )
        for summary in profile.domain_summary
    ]


def to_service_error(error: Exception) -> ServiceError:
    """Map provider and transport errors to ServiceError codes."""
    if isinstance(error, ServiceError):
        return error
    if isinstance(error, CLINotFoundError):
        return ServiceError("Claude CLI not available", "CONFIG_ERROR", details=error)
    if isinstance(error, (CLIJSONDecodeError, json.JSONDecodeError)):
        return ServiceError("Could not decode Claude output", "PARSING_ERROR", details=error)
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ServiceError("Claude API unreachable", "API_ERROR", details=error)
    return ServiceError("Unexpected error occurred", "API_ERROR", details=error)


class ClaudeCoachingService:
    """Coaching conversations grounded in a CliftonStrengths profile."""

    def __init__(
        self,
        config: Optional[CoachingConfig] = None,
        rate_limiter: Optional[RequestRateLimiter] = None,
    ):
        """
        Args:
            config: Model, turn and retry settings
            rate_limiter: Per-client limiter (a fresh default limiter when None)
        """
        self.config = config or CoachingConfig()
        self.rate_limiter = rate_limiter or RequestRateLimiter()
        self.system_prompt = get_system_prompt("coach_system")

    def _build_prompt(self, request: CoachingRequest) -> str:
        return render_prompt(
            "coaching/contextual.j2",
            profile=request.strengths_profile,
            request_type=request.type.value,
            message=request.message,
            context=request.context,
        )

    async def generate_coaching_response(self, request: CoachingRequest) -> CoachingResponse:
        """
        Answer one coaching request.

        Raises:
            RateLimitExceeded: If the client's budget is exhausted
            ServiceError: On Claude or parsing failures
        """
        session_id = request.session_id or generate_session_id()
        log = logger.bind(session_id=session_id, request_type=request.type.value)

        await self.rate_limiter.acquire(request.client_id or session_id)

        try:
            raw = await asyncio.wait_for(
                call_llm_with_retry(
                    self._build_prompt(request),
                    system_prompt=self.system_prompt,
                    model=self.config.model,
                    max_turns=self.config.max_turns,
                    max_retries=self.config.max_retries,
                    correlation_id=session_id,
                ),
                timeout=self.config.timeout_seconds,
            )
        except Exception as e:
            error = to_service_error(e)
            log.error("Coaching request failed", code=error.code, error=str(e))
            raise error from e

        cleaned = clean_coaching_response(raw)
        if cleaned != raw.strip():
            log.info("Removed meta-commentary from coaching response")

        questions = extract_follow_up_questions(cleaned)
        response = CoachingResponse(
            response=cleaned,
            suggestions=extract_suggestions(cleaned),
            session_id=session_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            type=request.type,
            follow_up_questions=questions or None,
        )
        log.info(
            "Coaching response generated",
            response_length=len(cleaned),
            suggestion_count=len(response.suggestions),
        )
        return response

    async def stream_coaching_response(self, request: CoachingRequest) -> AsyncIterator[str]:
        """
        Stream a coaching reply with bracketed text filtered out.

        Brackets may open in one chunk and close in a later one.

        Raises:
            RateLimitExceeded: If the client's budget is exhausted
            ServiceError: On Claude failures
        """
        session_id = request.session_id or generate_session_id()
        await self.rate_limiter.acquire(request.client_id or session_id)

        in_bracket = False
        try:
            async for chunk in stream_llm(
                self._build_prompt(request),
                system_prompt=self.system_prompt,
                model=self.config.model,
                max_turns=self.config.max_turns,
                correlation_id=session_id,
            ):
                visible = []
                for char in chunk:
                    if char == "[":
                        in_bracket = True
                    elif char == "]":
                        in_bracket = False
                    elif not in_bracket:
                        visible.append(char)
                if visible:
                    yield "".join(visible)
        except ServiceError:
            raise
        except Exception as e:
            error = to_service_error(e)
            logger.error("Coaching stream failed", code=error.code, error=str(e), session_id=session_id)  # type: ignore[attr-defined]
            raise error from e

    async def analyze_strengths_profile(
        self,
        profile: UserProfile,
        analysis_type: str = "comprehensive",
        client_id: str = "default",
    ) -> AnalysisResponse:
        """
        Ask Claude for a structured analysis of a profile.

        Model output that is not a JSON object matching AnalysisPayload falls
        back to a default summary and template insights. Domain analysis is
        always computed locally from the profile.

        Raises:
            RateLimitExceeded: If the client's budget is exhausted
            ServiceError: On Claude failures
        """
        await self.rate_limiter.acquire(client_id)

        prompt = render_prompt(
            "coaching/analysis.j2", profile=profile, analysis_type=analysis_type
        )
        try:
            raw = await asyncio.wait_for(
                call_llm_with_retry(
                    prompt,
                    system_prompt=self.system_prompt,
                    model=self.config.model,
                    max_turns=self.config.max_turns,
                    max_retries=self.config.max_retries,
                ),
                timeout=self.config.timeout_seconds,
            )
        except Exception as e:
            error = to_service_error(e)
            logger.error("Profile analysis failed", code=error.code, error=str(e))  # type: ignore[attr-defined]
            raise error from e

        try:
            payload = AnalysisPayload.model_validate_json(extract_json_from_markdown(raw))
        except ValidationError as e:
            logger.warning(  # type: ignore[attr-defined]
                "Invalid analysis response, using defaults",
                error_count=e.error_count(),
            )
            payload = AnalysisPayload()

        return AnalysisResponse(
            strengths=payload.strength_insights or default_strength_insights(profile),
            summary=payload.summary or "Comprehensive strengths analysis completed.",
            recommendations=payload.recommendations,
            dominant_domains=domain_analysis(profile),
            growth_opportunities=payload.growth_opportunities,
            analyzed_at=datetime.now(timezone.utc).isoformat(),
        )
