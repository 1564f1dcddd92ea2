"""
Strengths Extractor

Regex-based extraction of the user's name, assessment date and ranked
strengths from the text of a CliftonStrengths report.

All functions are pure: given the same text they return the same result.
"""

import re
from datetime import date
from typing import NamedTuple, Optional

from strengths_coach.models.strength import (
    CANONICAL_STRENGTH_NAMES,
    STRENGTH_DOMAIN_MAP,
    StrengthFormat,
)
from strengths_coach.utils.logger import get_logger

logger = get_logger(
    correlation_id="strengths-extractor",
    phase="pdf_parse",
    component="strengths_extractor",
)

UNKNOWN_USER = "Unknown User"
MAX_NAME_LENGTH = 50
MAX_LIST_LINE_LENGTH = 50

TRADEMARK_GLYPHS = "®™"

REPORT_INDICATORS = (
    "CliftonStrengths",
    "StrengthsFinder",
    "Gallup",
    "Top 5",
    "Executing",
    "Influencing",
    "Relationship Building",
    "Strategic Thinking",
)

# Words that show up in capitalized report headings but never in a person's name
_NON_NAME_WORDS = {
    "report",
    "assessment",
    "completion",
    "date",
    "cliftonstrengths",
    "strengthsfinder",
    "gallup",
    "strengths",
    "strength",
    "themes",
    "theme",
    "signature",
    "top",
    "domain",
    "domains",
    "executing",
    "influencing",
    "relationship",
    "building",
    "strategic",
    "thinking",
    "insight",
    "insights",
    "guide",
    "profile",
    "personalized",
    "copyright",
    "inc",
}

# Ordered: the first candidate that looks like a human name wins
_NAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    # AMYN PORBANDERWALA | 08-08-2025
    re.compile(r"([A-Z][A-Z'-]+(?:[ \t]+[A-Z][A-Z'-]+)+)[ \t]*\|[ \t]*\d{2}-\d{2}-\d{4}"),
    # Top 5 for Amyn Porbanderwala
    re.compile(r"Top[ \t]+(?:5|10|34)[ \t]+for[ \t]+([A-Z][A-Za-z'-]+(?:[ \t]+[A-Z][A-Za-z'-]+)+)"),
    # Amyn Porbanderwala | 08-08-2025
    re.compile(r"([A-Z][a-z'-]+(?:[ \t]+[A-Z][A-Za-z'-]+)+)[ \t]*\|[ \t]*\d{2}-\d{2}-\d{4}"),
    re.compile(r"CliftonStrengths[ \t]+for[ \t]+([^\n|]+)", re.IGNORECASE),
    re.compile(r"Report[ \t]+(?:Prepared[ \t]+)?for[ \t]+([^\n|]+)", re.IGNORECASE),
    re.compile(r"(?:Name|For):[ \t]*([^\n|]+)", re.IGNORECASE),
    # A line holding nothing but a proper-cased name
    re.compile(r"^[ \t]*([A-Z][a-z'-]+(?:[ \t]+[A-Z][A-Za-z'-]+)+)[ \t]*$", re.MULTILINE),
)

_NAME_CHARS = re.compile(r"^[A-Za-z' -]+$")

# (pattern, group order as (year, month, day))
_DATE_PATTERNS: tuple[tuple[re.Pattern[str], tuple[int, int, int]], ...] = (
    (re.compile(r"(?<![\d-])(\d{1,2})-(\d{1,2})-(\d{4})(?![\d-])"), (3, 2, 1)),  # DD-MM-YYYY
    (re.compile(r"(?<![\d-])(\d{4})-(\d{1,2})-(\d{1,2})(?![\d-])"), (1, 2, 3)),  # YYYY-MM-DD
    (re.compile(r"(?<![\d/])(\d{1,2})/(\d{1,2})/(\d{4})(?![\d/])"), (3, 1, 2)),  # MM/DD/YYYY
)

# "<rank>. <Name>[®™]", with an optional second word for "Self Assurance"
_NUMBERED_STRENGTH = re.compile(
    r"(?<![\d.])(\d{1,2})\.[ \t]*"
    r"([A-Za-z][A-Za-z-]*)"
    r"(?:[ \t]+([A-Za-z]+))?"
    r"[ \t]*([®™])?"
)

_STRENGTH_SYNONYMS = {
    "selfassurance": "Self-Assurance",
    "self assurance": "Self-Assurance",
    "self-assurance": "Self-Assurance",
}

_CANONICAL_BY_LOWER = {name.lower(): name for name in CANONICAL_STRENGTH_NAMES}


class ExtractedStrength(NamedTuple):
    """A canonical strength name and its rank as found in the text."""

    name: str
    rank: int
    has_trademark_symbol: bool = False


def _to_proper_case(name: str) -> str:
    return re.sub(r"\b[a-z]", lambda m: m.group(0).upper(), name.lower())


def looks_like_name(candidate: str) -> bool:
    """
    Check whether a string plausibly is a person's name.

    Two or more words, only letters/hyphens/apostrophes/spaces, at most 50
    characters, and no report heading words.
    """
    words = candidate.split()
    if len(words) < 2 or len(candidate) > MAX_NAME_LENGTH:
        return False
    if not _NAME_CHARS.match(candidate):
        return False
    return not any(word.lower().strip("'-") in _NON_NAME_WORDS for word in words)


def extract_user_name(text: str, placeholder: str = UNKNOWN_USER) -> str:
    """
    Extract the assessed person's name.

    Args:
        text: Full extracted report text
        placeholder: Returned when no pattern yields a plausible name

    Returns:
        Name in proper case (all-caps names are converted), or the placeholder
    """
    for pattern in _NAME_PATTERNS:
        for match in pattern.finditer(text):
            candidate = " ".join(match.group(1).split())
            if not looks_like_name(candidate):
                continue
            if candidate.isupper():
                candidate = _to_proper_case(candidate)
            logger.debug("User name extracted", pattern=pattern.pattern[:40])  # type: ignore[attr-defined]
            return candidate

    logger.warning("Could not extract user name, using placeholder", placeholder=placeholder)  # type: ignore[attr-defined]
    return placeholder


def extract_assessment_date(text: str, today: Optional[date] = None) -> date:
    """
    Extract the assessment date.

    Tries DD-MM-YYYY, then YYYY-MM-DD, then MM/DD/YYYY. Matches that do not
    form a real calendar date are skipped.

    Args:
        text: Full extracted report text
        today: Fallback date (defaults to date.today())

    Returns:
        The first valid date found, else the fallback
    """
    for pattern, (year_group, month_group, day_group) in _DATE_PATTERNS:
        for match in pattern.finditer(text):
            try:
                return date(
                    int(match.group(year_group)),
                    int(match.group(month_group)),
                    int(match.group(day_group)),
                )
            except ValueError:
                continue

    logger.info("No assessment date found, defaulting to today")  # type: ignore[attr-defined]
    return today if today is not None else date.today()


def normalize_strength_name(raw: str) -> str:
    """
    Normalize a raw strength token to its canonical spelling.

    Strips trademark glyphs, collapses whitespace, fixes case and maps the
    Self-Assurance hyphenation variants. Unknown names are returned cleaned
    but otherwise unchanged.
    """
    cleaned = " ".join(raw.translate({ord(c): None for c in TRADEMARK_GLYPHS}).split())
    lowered = cleaned.lower()

    if lowered in _STRENGTH_SYNONYMS:
        return _STRENGTH_SYNONYMS[lowered]
    return _CANONICAL_BY_LOWER.get(lowered, cleaned)


def is_canonical_strength(name: str) -> bool:
    """Check if a name is one of the 34 canonical strengths."""
    return name in STRENGTH_DOMAIN_MAP


def _extract_numbered_strengths(text: str) -> list[ExtractedStrength]:
    found: list[ExtractedStrength] = []
    seen: set[str] = set()

    for match in _NUMBERED_STRENGTH.finditer(text):
        rank = int(match.group(1))
        if not 1 <= rank <= len(CANONICAL_STRENGTH_NAMES):
            continue

        first_word, second_word, glyph = match.group(2), match.group(3), match.group(4)
        name = None
        if second_word:
            two_words = normalize_strength_name(f"{first_word} {second_word}")
            if is_canonical_strength(two_words):
                name = two_words
        if name is None:
            single = normalize_strength_name(first_word)
            if is_canonical_strength(single):
                name = single

        if name is None or name in seen:
            continue

        seen.add(name)
        found.append(ExtractedStrength(name=name, rank=rank, has_trademark_symbol=bool(glyph)))

    return found


def _extract_listed_strengths(text: str) -> list[ExtractedStrength]:
    found: list[ExtractedStrength] = []
    seen: set[str] = set()

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or len(stripped) > MAX_LIST_LINE_LENGTH:
            continue

        lowered = stripped.lower()
        for name in CANONICAL_STRENGTH_NAMES:
            if name.lower() in lowered:
                if name not in seen:
                    seen.add(name)
                    found.append(
                        ExtractedStrength(
                            name=name,
                            rank=len(found) + 1,
                            has_trademark_symbol=any(g in stripped for g in TRADEMARK_GLYPHS),
                        )
                    )
                break

    return found


def rerank(strengths: list[ExtractedStrength]) -> list[ExtractedStrength]:
    """Sort by rank (stable) and renumber contiguously from 1."""
    ordered = sorted(strengths, key=lambda s: s.rank)
    return [s._replace(rank=index) for index, s in enumerate(ordered, start=1)]


def extract_strengths(text: str) -> list[ExtractedStrength]:
    """
    Extract ranked canonical strengths from report text.

    Pass 1 reads numbered lines (``1. Achiever®``); the first occurrence of
    each name wins. Pass 2 runs only if pass 1 found nothing: every short
    line is searched for a canonical name and ranks follow first-seen order.

    Returns:
        Strengths sorted by rank with ranks renumbered 1..N (empty when none found)
    """
    strengths = _extract_numbered_strengths(text)
    method = "numbered"

    if not strengths:
        strengths = _extract_listed_strengths(text)
        method = "listed"

    result = rerank(strengths)

    logger.info(  # type: ignore[attr-defined]
        "Strengths extracted",
        method=method,
        strength_count=len(result),
        top_five=[s.name for s in result[:5]],
    )
    return result


def determine_format(count: int, top_10_min: int = 10, full_34_min: int = 30) -> StrengthFormat:
    """Classify a report by its number of strengths."""
    if count >= full_34_min:
        return StrengthFormat.FULL_34
    if count >= top_10_min:
        return StrengthFormat.TOP_10
    return StrengthFormat.TOP_5


def is_clifton_strengths_report(text: str) -> bool:
    """Check the text for any CliftonStrengths report indicator (case-insensitive)."""
    lowered = text.lower()
    return any(indicator.lower() in lowered for indicator in REPORT_INDICATORS)


def generate_warnings(text: str, strengths: list[ExtractedStrength]) -> list[str]:
    """Build non-fatal warnings about a parse."""
    warnings = []

    if len(strengths) < 5:
        warnings.append(
            "Found fewer than 5 strengths - this may not be a complete CliftonStrengths report"
        )

    if "CliftonStrengths" not in text and "StrengthsFinder" not in text:
        warnings.append("Document may not be an official CliftonStrengths report")

    return warnings
