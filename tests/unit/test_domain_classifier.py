"""
Unit tests for the domain classifier.
"""

from collections import Counter

import pytest

from strengths_coach.models.strength import (
    CANONICAL_STRENGTH_NAMES,
    STRENGTH_DESCRIPTIONS,
    STRENGTH_DOMAIN_MAP,
    Strength,
    StrengthDomain,
)
from strengths_coach.services.domain_classifier import (
    DEFAULT_DOMAIN,
    build_domain_summary,
    classify_strength,
    describe_strength,
    find_leading_domain,
    strengths_in_domain,
)


def _strengths(names):
    return [
        Strength(name=n, rank=rank, domain=classify_strength(n))
        for rank, n in enumerate(names, start=1)
    ]


class TestReferenceTables:
    """Test cases for the static strength tables."""

    def test_thirty_four_strengths(self):
        """Test that the table holds exactly 34 unique strengths."""
        assert len(STRENGTH_DOMAIN_MAP) == 34
        assert len(set(CANONICAL_STRENGTH_NAMES)) == 34

    def test_domain_sizes(self):
        """Test the 9/8/9/8 split across the four domains."""
        # Act
        counts = Counter(STRENGTH_DOMAIN_MAP.values())

        # Assert
        assert counts[StrengthDomain.EXECUTING] == 9
        assert counts[StrengthDomain.INFLUENCING] == 8
        assert counts[StrengthDomain.RELATIONSHIP_BUILDING] == 9
        assert counts[StrengthDomain.STRATEGIC_THINKING] == 8

    def test_every_strength_has_description(self):
        """Test that descriptions cover exactly the canonical names."""
        assert set(STRENGTH_DESCRIPTIONS) == set(CANONICAL_STRENGTH_NAMES)

    def test_strengths_in_domain_round_trip(self):
        """Test that every name listed for a domain classifies back to it."""
        for domain in StrengthDomain:
            for name in strengths_in_domain(domain):
                assert classify_strength(name) == domain


class TestClassifyStrength:
    """Test cases for classify_strength."""

    @pytest.mark.parametrize(
        "name,domain",
        [
            ("Achiever", StrengthDomain.EXECUTING),
            ("Self-Assurance", StrengthDomain.INFLUENCING),
            ("Woo", StrengthDomain.INFLUENCING),
            ("Relator", StrengthDomain.RELATIONSHIP_BUILDING),
            ("Strategic", StrengthDomain.STRATEGIC_THINKING),
        ],
    )
    def test_known_names(self, name, domain):
        """Test lookups for canonical names."""
        assert classify_strength(name) == domain

    def test_unknown_name_falls_back_to_default(self):
        """Test that unknown names return the default domain instead of raising."""
        assert classify_strength("Leadership") == DEFAULT_DOMAIN

    def test_describe_unknown_is_empty(self):
        """Test that unknown names have no description."""
        assert describe_strength("Leadership") == ""
        assert describe_strength("Woo").startswith("You love the challenge")


class TestBuildDomainSummary:
    """Test cases for build_domain_summary."""

    def test_counts_sum_to_total(self):
        """Test that per-domain counts add up to the number of strengths."""
        # Arrange
        strengths = _strengths(CANONICAL_STRENGTH_NAMES)

        # Act
        summary = build_domain_summary(strengths)

        # Assert
        assert sum(d.count for d in summary) == 34
        assert [d.domain for d in summary] == [
            StrengthDomain.EXECUTING,
            StrengthDomain.RELATIONSHIP_BUILDING,
            StrengthDomain.INFLUENCING,
            StrengthDomain.STRATEGIC_THINKING,
        ]

    def test_omits_empty_domains_and_sorts_members(self):
        """Test that only present domains appear with rank-sorted members."""
        # Arrange
        strengths = _strengths(["Focus", "Woo", "Achiever"])

        # Act
        summary = build_domain_summary(reversed(strengths))

        # Assert
        assert [(d.domain, d.count) for d in summary] == [
            (StrengthDomain.EXECUTING, 2),
            (StrengthDomain.INFLUENCING, 1),
        ]
        assert [s.name for s in summary[0].strengths] == ["Focus", "Achiever"]

    def test_every_strength_lands_in_its_own_domain(self):
        """Test that summary membership matches each strength's domain."""
        # Arrange
        strengths = _strengths(["Strategic", "Achiever", "Learner", "Focus", "Relator"])

        # Act
        summary = build_domain_summary(strengths)

        # Assert
        for entry in summary:
            assert all(s.domain == entry.domain for s in entry.strengths)


class TestFindLeadingDomain:
    """Test cases for find_leading_domain."""

    def test_majority_domain(self):
        """Test that the most frequent top-5 domain wins."""
        # Arrange
        strengths = _strengths(["Achiever", "Arranger", "Focus", "Strategic", "Woo"])

        # Act & Assert
        assert find_leading_domain(strengths) == StrengthDomain.EXECUTING

    def test_tie_goes_to_first_domain_in_rank_order(self):
        """Test that a 2-2 tie is won by the domain of the higher-ranked strength."""
        # Arrange
        strengths = _strengths(["Strategic", "Achiever", "Learner", "Focus", "Relator"])

        # Act & Assert
        assert find_leading_domain(strengths) == StrengthDomain.STRATEGIC_THINKING

    def test_only_top_five_count(self):
        """Test that strengths ranked below 5 do not affect the leading domain."""
        # Arrange
        strengths = _strengths(
            ["Woo", "Command", "Activator", "Achiever", "Focus", "Arranger", "Belief", "Discipline"]
        )

        # Act & Assert
        assert find_leading_domain(strengths) == StrengthDomain.INFLUENCING

    def test_uses_rank_not_list_order(self):
        """Test that input order does not matter, only rank."""
        # Arrange
        strengths = _strengths(["Relator", "Strategic", "Empathy", "Input"])

        # Act
        leading = find_leading_domain(list(reversed(strengths)))

        # Assert
        assert leading == StrengthDomain.RELATIONSHIP_BUILDING

    def test_empty_raises(self):
        """Test that an empty profile has no leading domain."""
        with pytest.raises(ValueError):
            find_leading_domain([])
