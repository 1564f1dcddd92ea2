"""
Unit tests for strength data models.
"""

import pytest
from pydantic import ValidationError

from strengths_coach.models.strength import (
    ExtractionErrorCode,
    ParsedPDFResult,
    Strength,
    StrengthDomain,
)


class TestStrength:
    """Test cases for the Strength model."""

    def test_rejects_non_canonical_name(self):
        """Test that only canonical strength names are accepted."""
        with pytest.raises(ValidationError, match="Unknown CliftonStrengths theme"):
            Strength(name="Leadership", rank=1, domain=StrengthDomain.EXECUTING)

    def test_rank_must_be_positive(self):
        """Test that ranks start at 1."""
        with pytest.raises(ValidationError):
            Strength(name="Woo", rank=0, domain=StrengthDomain.INFLUENCING)

    def test_accepts_camel_case_input(self):
        """Test population from the camelCase JSON shape."""
        # Act
        strength = Strength.model_validate(
            {"name": "Woo", "rank": 1, "domain": "Influencing", "hasTrademarkSymbol": True}
        )

        # Assert
        assert strength.has_trademark_symbol is True
        assert strength.domain == StrengthDomain.INFLUENCING


class TestParsedPDFResult:
    """Test cases for the result envelope."""

    def test_failure_carries_no_data(self):
        """Test that failure results have an error code and no profile."""
        # Act
        result = ParsedPDFResult.failure(
            ExtractionErrorCode.EXTRACTION_FAILED, "No strengths found"
        )

        # Assert
        assert result.success is False
        assert result.data is None
        assert result.error == ExtractionErrorCode.EXTRACTION_FAILED
        assert result.warnings == []

    def test_failure_serializes_error_code(self):
        """Test the camelCase JSON form of a failure."""
        # Act
        data = ParsedPDFResult.failure(
            ExtractionErrorCode.NOT_A_CLIFTONSTRENGTHS_REPORT, "Not a report"
        ).model_dump(by_alias=True, mode="json")

        # Assert
        assert data["error"] == "NOT_A_CLIFTONSTRENGTHS_REPORT"
        assert data["fullTextContent"] is None
        assert data["extractionMethod"] is None

    def test_success_requires_data(self):
        """Test that a successful result cannot omit the profile."""
        with pytest.raises(ValidationError, match="successful result requires data"):
            ParsedPDFResult(success=True, extraction_method="regex")

    def test_success_rejects_error_code(self, make_profile):
        """Test that a successful result cannot carry an error code."""
        with pytest.raises(ValidationError, match="no error"):
            ParsedPDFResult(
                success=True,
                data=make_profile(["Woo"]),
                error=ExtractionErrorCode.EXTRACTION_FAILED,
            )

    def test_failure_rejects_data(self, make_profile):
        """Test that a failed result cannot carry a profile."""
        with pytest.raises(ValidationError, match="must not carry data"):
            ParsedPDFResult(
                success=False,
                data=make_profile(["Woo"]),
                error=ExtractionErrorCode.EXTRACTION_FAILED,
            )
