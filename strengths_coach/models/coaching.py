"""
Coaching Data Models

Request/response shapes for the Claude coaching service and its error type.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from strengths_coach.models.strength import StrengthDomain, UserProfile


# Service error codes
SERVICE_ERROR_CODES = {
    "RATE_LIMIT",  # Per-minute or per-hour request budget exhausted
    "API_ERROR",  # Claude call failed or returned an unexpected shape
    "PARSING_ERROR",  # Model output could not be turned into a response
    "CONFIG_ERROR",  # Missing or invalid credentials/configuration
}


class ServiceError(Exception):
    """Raised by the coaching service with a machine-readable code."""

    def __init__(self, message: str, code: str, details: Optional[object] = None):
        if code not in SERVICE_ERROR_CODES:
            raise ValueError(
                f"Invalid service error code: {code}. Must be one of {SERVICE_ERROR_CODES}"
            )
        super().__init__(message)
        self.code = code
        self.details = details


class CoachingRequestType(str, Enum):
    """Kinds of coaching conversation the service supports."""

    GENERAL_CHAT = "general_chat"
    SUMMARY = "summary"
    DEEP_DIVE = "deep_dive"
    GROWTH_PLANNING = "growth_planning"


class CoachingRequest(BaseModel):
    """A single user turn sent to the coach.

    Attributes:
        message: The user's message or focus area
        type: Conversation mode, controls the prompt wording
        strengths_profile: Parsed profile to ground the answer (optional)
        context: Free-text extra context appended to the prompt
        session_id: Existing session id; generated when absent
        client_id: Key used for rate limiting (defaults to session id)
    """

    message: str = ""
    type: CoachingRequestType = CoachingRequestType.GENERAL_CHAT
    strengths_profile: Optional[UserProfile] = None
    context: Optional[str] = None
    session_id: Optional[str] = None
    client_id: Optional[str] = None


class CoachingResponse(BaseModel):
    """Cleaned coach reply with extracted suggestions and questions."""

    response: str
    suggestions: list[str] = Field(default_factory=list)
    session_id: str
    timestamp: str
    type: CoachingRequestType
    follow_up_questions: Optional[list[str]] = None
    confidence: float = Field(default=0.85, ge=0.0, le=1.0)


class StrengthInsight(BaseModel):
    """Personalized insight for one of the top strengths."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    rank: int
    domain: StrengthDomain
    personalized_description: str
    leverage_strategy: str
    potential_blind_spots: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)


class DomainAnalysis(BaseModel):
    """Domain-level share of a profile and its leadership style."""

    domain: StrengthDomain
    strength_count: int
    percentage: float
    insights: str
    leadership_style: str


class AnalysisPayload(BaseModel):
    """JSON object the model returns for a profile analysis.

    Missing or null fields decode to empty values; any other shape mismatch
    fails validation as a whole.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: Optional[str] = None
    recommendations: list[str] = Field(default_factory=list)
    growth_opportunities: list[str] = Field(default_factory=list)
    strength_insights: list[StrengthInsight] = Field(default_factory=list)

    @field_validator(
        "recommendations", "growth_opportunities", "strength_insights", mode="before"
    )
    @classmethod
    def null_to_empty(cls, v: object) -> object:
        return [] if v is None else v


class AnalysisResponse(BaseModel):
    """Structured output of a full profile analysis."""

    strengths: list[StrengthInsight]
    summary: str
    recommendations: list[str] = Field(default_factory=list)
    dominant_domains: list[DomainAnalysis] = Field(default_factory=list)
    growth_opportunities: list[str] = Field(default_factory=list)
    analyzed_at: str
