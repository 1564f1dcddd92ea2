"""
Profile Assembler

Pure composition of extractor and classifier output into an immutable
UserProfile. No I/O.
"""

from datetime import date
from typing import Optional, Sequence

from strengths_coach.models.config import ParserConfig
from strengths_coach.models.strength import Strength, UserProfile
from strengths_coach.services.domain_classifier import (
    build_domain_summary,
    classify_strength,
    describe_strength,
    find_leading_domain,
)
from strengths_coach.services.strengths_extractor import (
    ExtractedStrength,
    determine_format,
    rerank,
)


def build_strengths(
    extracted: Sequence[ExtractedStrength],
    descriptions: Optional[dict[str, str]] = None,
) -> list[Strength]:
    """
    Annotate extracted strengths with domain and description.

    Args:
        extracted: Canonical names with ranks (any order, gaps allowed)
        descriptions: Per-name descriptions overriding the static reference text

    Returns:
        Strengths sorted by rank and renumbered 1..N
    """
    descriptions = descriptions or {}
    return [
        Strength(
            name=item.name,
            rank=item.rank,
            domain=classify_strength(item.name),
            description=descriptions.get(item.name) or describe_strength(item.name),
            has_trademark_symbol=item.has_trademark_symbol,
        )
        for item in rerank(list(extracted))
    ]


def assemble_profile(
    name: str,
    assessment_date: date,
    extracted: Sequence[ExtractedStrength],
    config: Optional[ParserConfig] = None,
    descriptions: Optional[dict[str, str]] = None,
) -> UserProfile:
    """
    Build a UserProfile from extracted parts.

    Args:
        name: Person's name (or placeholder)
        assessment_date: Assessment date
        extracted: Canonical strengths with ranks
        config: Parser config supplying the format thresholds
        descriptions: Optional description overrides (AI path)

    Returns:
        Fully derived, immutable UserProfile

    Raises:
        ValueError: If no strengths were given
    """
    if not extracted:
        raise ValueError("Cannot assemble a profile without strengths")

    config = config or ParserConfig()
    strengths = build_strengths(extracted, descriptions)

    return UserProfile(
        name=name,
        assessment_date=assessment_date,
        format=determine_format(
            len(strengths),
            top_10_min=config.top_10_min,
            full_34_min=config.full_34_min,
        ),
        strengths=strengths,
        top_five=strengths[:5],
        top_ten=strengths[:10] if len(strengths) >= 10 else None,
        domain_summary=build_domain_summary(strengths),
        leading_domain=find_leading_domain(strengths),
    )
