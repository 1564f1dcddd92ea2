"""CliftonStrengths data models, reference tables, and extraction result types."""

from datetime import date
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class StrengthDomain(str, Enum):
    """The four CliftonStrengths domains, in declaration (tie-break) order."""

    EXECUTING = "Executing"
    INFLUENCING = "Influencing"
    RELATIONSHIP_BUILDING = "Relationship Building"
    STRATEGIC_THINKING = "Strategic Thinking"


class StrengthFormat(str, Enum):
    """Report format, derived from the number of ranked strengths."""

    TOP_5 = "top5"
    TOP_10 = "top10"
    FULL_34 = "full34"


class ExtractionErrorCode(str, Enum):
    """Failure codes returned by the PDF parser instead of raised exceptions."""

    EMPTY_OR_UNREADABLE_PDF = "EMPTY_OR_UNREADABLE_PDF"
    NOT_A_CLIFTONSTRENGTHS_REPORT = "NOT_A_CLIFTONSTRENGTHS_REPORT"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    AI_FALLBACK_UNAVAILABLE = "AI_FALLBACK_UNAVAILABLE"


# Canonical strength name -> domain (CliftonStrengths framework)
STRENGTH_DOMAIN_MAP: dict[str, StrengthDomain] = {
    # Executing
    "Achiever": StrengthDomain.EXECUTING,
    "Arranger": StrengthDomain.EXECUTING,
    "Belief": StrengthDomain.EXECUTING,
    "Consistency": StrengthDomain.EXECUTING,
    "Deliberative": StrengthDomain.EXECUTING,
    "Discipline": StrengthDomain.EXECUTING,
    "Focus": StrengthDomain.EXECUTING,
    "Responsibility": StrengthDomain.EXECUTING,
    "Restorative": StrengthDomain.EXECUTING,
    # Influencing
    "Activator": StrengthDomain.INFLUENCING,
    "Command": StrengthDomain.INFLUENCING,
    "Communication": StrengthDomain.INFLUENCING,
    "Competition": StrengthDomain.INFLUENCING,
    "Maximizer": StrengthDomain.INFLUENCING,
    "Self-Assurance": StrengthDomain.INFLUENCING,
    "Significance": StrengthDomain.INFLUENCING,
    "Woo": StrengthDomain.INFLUENCING,
    # Relationship Building
    "Adaptability": StrengthDomain.RELATIONSHIP_BUILDING,
    "Connectedness": StrengthDomain.RELATIONSHIP_BUILDING,
    "Developer": StrengthDomain.RELATIONSHIP_BUILDING,
    "Empathy": StrengthDomain.RELATIONSHIP_BUILDING,
    "Harmony": StrengthDomain.RELATIONSHIP_BUILDING,
    "Includer": StrengthDomain.RELATIONSHIP_BUILDING,
    "Individualization": StrengthDomain.RELATIONSHIP_BUILDING,
    "Positivity": StrengthDomain.RELATIONSHIP_BUILDING,
    "Relator": StrengthDomain.RELATIONSHIP_BUILDING,
    # Strategic Thinking
    "Analytical": StrengthDomain.STRATEGIC_THINKING,
    "Context": StrengthDomain.STRATEGIC_THINKING,
    "Futuristic": StrengthDomain.STRATEGIC_THINKING,
    "Ideation": StrengthDomain.STRATEGIC_THINKING,
    "Input": StrengthDomain.STRATEGIC_THINKING,
    "Intellection": StrengthDomain.STRATEGIC_THINKING,
    "Learner": StrengthDomain.STRATEGIC_THINKING,
    "Strategic": StrengthDomain.STRATEGIC_THINKING,
}

CANONICAL_STRENGTH_NAMES: tuple[str, ...] = tuple(STRENGTH_DOMAIN_MAP)

STRENGTH_DESCRIPTIONS: dict[str, str] = {
    "Achiever": "You work hard and possess a great deal of stamina. You take immense satisfaction in being busy and productive.",
    "Activator": "You can make things happen by turning thoughts into action. You want to do things now, rather than simply talk about them.",
    "Adaptability": 'You prefer to go with the flow. You tend to be "now" people who take things as they come and discover the future one day at a time.',
    "Analytical": "You search for reasons and causes. You have the ability to think about all of the factors that might affect a situation.",
    "Arranger": "You can organize, but you also have a flexibility that complements this ability. You like to determine how all of the pieces and resources can be arranged for maximum productivity.",
    "Belief": "You have certain core values that are unchanging. Out of these values emerges a defined purpose for your life.",
    "Command": "You have presence. You can take control of a situation and make decisions.",
    "Communication": "You generally find it easy to put your thoughts into words. You are good conversationalists and presenters.",
    "Competition": "You measure your progress against the performance of others. You strive to win first place and revel in contests.",
    "Connectedness": "You have faith in the links among all things. You believe there are few coincidences and that almost every event has meaning.",
    "Consistency": "You are keenly aware of the need to treat people the same. You crave stable routines and clear rules and procedures that everyone can follow.",
    "Context": "You enjoy thinking about the past. You understand the present by researching its history.",
    "Deliberative": "You are best described by the serious care you take in making decisions or choices. You anticipate obstacles.",
    "Developer": "You recognize and cultivate the potential in others. You spot the signs of each small improvement and derive satisfaction from evidence of progress.",
    "Discipline": "You enjoy routine and structure. Your world is best described by the order you create.",
    "Empathy": "You can sense other people's feelings by imagining yourself in their lives or situations.",
    "Focus": "You can take a direction, follow through and make the corrections necessary to stay on track. You prioritize, then act.",
    "Futuristic": "You are inspired by the future and what could be. You energize others with your visions of the future.",
    "Harmony": "You look for consensus. You don't enjoy conflict; rather, you seek areas of agreement.",
    "Ideation": "You are fascinated by ideas. You are able to find connections between seemingly disparate phenomena.",
    "Includer": "You accept others. You show awareness of those who feel left out and make an effort to include them.",
    "Individualization": "You are intrigued with the unique qualities of each person. You have a gift for figuring out how different people can work together productively.",
    "Input": "You have a need to collect and archive. You may accumulate information, ideas, artifacts or even relationships.",
    "Intellection": "You are characterized by your intellectual activity. You are introspective and appreciate intellectual discussions.",
    "Learner": "You have a great desire to learn and want to continuously improve. The process of learning, rather than the outcome, excites you.",
    "Maximizer": "You focus on strengths as a way to stimulate personal and group excellence. You seek to transform something strong into something superb.",
    "Positivity": "You have contagious enthusiasm. You are upbeat and can get others excited about what they are going to do.",
    "Relator": "You enjoy close relationships with others. You find deep satisfaction in working hard with friends to achieve a goal.",
    "Responsibility": "You take psychological ownership of what you say you will do. You are committed to stable values such as honesty and loyalty.",
    "Restorative": "You are adept at dealing with problems. You are good at figuring out what is wrong and resolving it.",
    "Self-Assurance": "You feel confident in your ability to take risks and manage your own life. You have an inner compass that gives you certainty in your decisions.",
    "Significance": "You want to make a big impact. You are independent and prioritize projects based on how much influence they will have on your organization or people around you.",
    "Strategic": "You create alternative ways to proceed. Faced with any given scenario, you can quickly spot the relevant patterns and issues.",
    "Woo": "You love the challenge of meeting new people and winning them over. You derive satisfaction from breaking the ice and making a connection with someone.",
}


class _CamelModel(BaseModel):
    """Base for records serialized to the camelCase JSON shape used by callers."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class Strength(_CamelModel):
    """One ranked CliftonStrengths theme within a profile.

    Attributes:
        name: Canonical strength name (one of CANONICAL_STRENGTH_NAMES)
        rank: 1-based position in the profile
        domain: Domain derived from STRENGTH_DOMAIN_MAP
        description: Static reference text for the strength
        has_trademark_symbol: Whether the source text carried a ® or ™ glyph
    """

    name: str
    rank: int = Field(ge=1)
    domain: StrengthDomain
    description: str = ""
    has_trademark_symbol: bool = False

    @field_validator("name")
    @classmethod
    def validate_canonical_name(cls, v: str) -> str:
        """Only the 34 canonical strength names are accepted."""
        if v not in STRENGTH_DOMAIN_MAP:
            raise ValueError(f"Unknown CliftonStrengths theme: {v}")
        return v


class DomainSummary(_CamelModel):
    """Per-domain aggregate of a profile's strengths."""

    domain: StrengthDomain
    count: int = Field(ge=0)
    strengths: list[Strength] = Field(default_factory=list)


class UserProfile(_CamelModel):
    """Immutable profile assembled from a single successful PDF parse."""

    name: str
    assessment_date: date
    format: StrengthFormat
    strengths: list[Strength]
    top_five: list[Strength]
    top_ten: Optional[list[Strength]] = None
    domain_summary: list[DomainSummary]
    leading_domain: StrengthDomain


class AdditionalUserInfo(_CamelModel):
    """Optional extra fields the AI extraction path may find in a report."""

    email: Optional[str] = None
    completion_date: Optional[str] = None
    report_id: Optional[str] = None
    organization: Optional[str] = None
    language: Optional[str] = None


class ParsedPDFResult(_CamelModel):
    """Result envelope returned across the parser's public boundary.

    Callers must check ``success`` before reading ``data``.
    """

    success: bool
    data: Optional[UserProfile] = None
    error: Optional[ExtractionErrorCode] = None
    message: str = ""
    warnings: list[str] = Field(default_factory=list)
    full_text_content: Optional[str] = None
    additional_user_info: Optional[AdditionalUserInfo] = None
    extraction_method: Optional[Literal["regex", "ai"]] = None

    @model_validator(mode="after")
    def check_outcome_fields(self) -> "ParsedPDFResult":
        """A success carries a profile and no error; a failure carries no profile."""
        if self.success and (self.data is None or self.error is not None):
            raise ValueError("successful result requires data and no error")
        if not self.success and self.data is not None:
            raise ValueError("failed result must not carry data")
        return self

    @classmethod
    def failure(
        cls, error: ExtractionErrorCode, message: str
    ) -> "ParsedPDFResult":
        """Build a failure result carrying no profile data."""
        return cls(success=False, error=error, message=message)
