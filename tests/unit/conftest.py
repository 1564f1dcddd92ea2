"""
Shared fixtures for unit tests: sample report texts and profile builders.
"""

from datetime import date

import pytest

from strengths_coach.models.strength import CANONICAL_STRENGTH_NAMES
from strengths_coach.services.profile_assembler import assemble_profile
from strengths_coach.services.strengths_extractor import ExtractedStrength

TOP_FIVE_REPORT = """\
AMYN PORBANDERWALA | 08-08-2025
CliftonStrengths Top 5
1. Strategic®
2. Achiever®
3. Learner®
4. Focus®
5. Relator®
Gallup, Inc. All rights reserved.
"""

EXECUTING_FIRST_ORDER = [
    "Achiever",
    "Arranger",
    "Focus",
    "Strategic",
    "Woo",
]


def numbered_report(names, header="Top 34 for Jordan Smith\nCliftonStrengths 34\n"):
    """Build report text with one ``N. Name®`` line per strength."""
    lines = [f"{rank}. {name}®" for rank, name in enumerate(names, start=1)]
    return header + "\n".join(lines) + "\n"


def full_34_order():
    """All 34 strengths with EXECUTING_FIRST_ORDER at the top."""
    rest = [n for n in CANONICAL_STRENGTH_NAMES if n not in EXECUTING_FIRST_ORDER]
    return EXECUTING_FIRST_ORDER + rest


@pytest.fixture
def top_five_report() -> str:
    return TOP_FIVE_REPORT


@pytest.fixture
def full_34_report() -> str:
    return numbered_report(full_34_order())


@pytest.fixture
def make_profile():
    """Factory building a UserProfile from strength names in rank order."""

    def _make(names, name="Jordan Smith", assessment_date=date(2025, 1, 15)):
        extracted = [
            ExtractedStrength(name=n, rank=rank) for rank, n in enumerate(names, start=1)
        ]
        return assemble_profile(name, assessment_date, extracted)

    return _make
