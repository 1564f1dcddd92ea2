"""
Domain Classifier

Maps strength names to their CliftonStrengths domain and aggregates a
profile's strengths per domain.
"""

from collections import Counter
from typing import Iterable, Sequence

from strengths_coach.models.strength import (
    STRENGTH_DESCRIPTIONS,
    STRENGTH_DOMAIN_MAP,
    DomainSummary,
    Strength,
    StrengthDomain,
)
from strengths_coach.utils.logger import get_logger

logger = get_logger(
    correlation_id="domain-classifier",
    phase="pdf_parse",
    component="domain_classifier",
)

DEFAULT_DOMAIN = StrengthDomain.EXECUTING

# Declaration order of the enum is the tie-break order for summaries
_DOMAIN_ORDER = {domain: index for index, domain in enumerate(StrengthDomain)}


def classify_strength(name: str) -> StrengthDomain:
    """
    Look up the domain for a strength name.

    Unknown names do not abort a parse: they log a warning and fall back to
    DEFAULT_DOMAIN.
    """
    domain = STRENGTH_DOMAIN_MAP.get(name)
    if domain is None:
        logger.warning(  # type: ignore[attr-defined]
            "Unknown strength name, using default domain",
            strength_name=name,
            default_domain=DEFAULT_DOMAIN.value,
        )
        return DEFAULT_DOMAIN
    return domain


def describe_strength(name: str) -> str:
    """Return the static description for a strength (empty when unknown)."""
    return STRENGTH_DESCRIPTIONS.get(name, "")


def strengths_in_domain(domain: StrengthDomain) -> tuple[str, ...]:
    """Return the canonical strength names belonging to a domain, in table order."""
    return tuple(name for name, d in STRENGTH_DOMAIN_MAP.items() if d == domain)


def build_domain_summary(strengths: Iterable[Strength]) -> list[DomainSummary]:
    """
    Group strengths by domain.

    Args:
        strengths: Strengths of a single profile

    Returns:
        One DomainSummary per non-empty domain, each with rank-sorted strengths,
        sorted by count descending (ties in domain declaration order)
    """
    grouped: dict[StrengthDomain, list[Strength]] = {}
    for strength in strengths:
        grouped.setdefault(strength.domain, []).append(strength)

    summary = [
        DomainSummary(
            domain=domain,
            count=len(members),
            strengths=sorted(members, key=lambda s: s.rank),
        )
        for domain, members in grouped.items()
    ]

    return sorted(summary, key=lambda d: (-d.count, _DOMAIN_ORDER[d.domain]))


def find_leading_domain(strengths: Sequence[Strength]) -> StrengthDomain:
    """
    Find the domain best represented among the top 5 strengths.

    Only the first five strengths (by rank) are counted. On a tie the domain
    encountered first in rank order wins, e.g. Strategic, Achiever, Learner,
    Focus puts Strategic Thinking ahead of Executing at 2 each.

    Raises:
        ValueError: If there are no strengths
    """
    top_five = sorted(strengths, key=lambda s: s.rank)[:5]
    if not top_five:
        raise ValueError("Cannot determine leading domain without strengths")

    # Counter preserves first-insertion order, and max() keeps the first maximum
    counts = Counter(s.domain for s in top_five)
    return max(counts, key=lambda domain: counts[domain])
