"""
CliftonStrengths PDF Parser

Orchestrates text extraction, report detection, regex extraction, the
optional AI fallback and profile assembly. The public methods never raise:
every outcome is a ParsedPDFResult.

Example Usage:
    parser = CliftonStrengthsPDFParser(config.parser)
    result = await parser.parse_pdf(pdf_bytes)
    if result.success:
        print(result.data.leading_domain)
"""

import uuid
from datetime import date
from pathlib import Path
from typing import Optional

from strengths_coach.models.config import ParserConfig
from strengths_coach.models.strength import ExtractionErrorCode, ParsedPDFResult
from strengths_coach.services.ai_extractor import (
    AIExtractedProfile,
    AIExtractor,
    canonical_strengths,
    parse_ai_date,
)
from strengths_coach.services.pdf_text_extractor import PDFReadError, extract_text_from_pdf
from strengths_coach.services.profile_assembler import assemble_profile
from strengths_coach.services.strengths_extractor import (
    extract_assessment_date,
    extract_strengths,
    extract_user_name,
    generate_warnings,
    is_clifton_strengths_report,
)
from strengths_coach.utils.logger import get_logger

logger = get_logger(
    correlation_id="pdf-parser",
    phase="pdf_parse",
    component="pdf_parser",
)


class CliftonStrengthsPDFParser:
    """Turns CliftonStrengths report PDFs into UserProfile results."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        ai_extractor: Optional[AIExtractor] = None,
        today: Optional[date] = None,
    ):
        """
        Initialize parser.

        Args:
            config: Parser configuration (defaults when None)
            ai_extractor: AI fallback (built from config when None)
            today: Fixed fallback date for reports without one
        """
        self.config = config or ParserConfig()
        self.ai_extractor = ai_extractor or AIExtractor(self.config)
        self.today = today

    async def parse_pdf(self, pdf_bytes: bytes) -> ParsedPDFResult:
        """
        Parse raw PDF bytes.

        Args:
            pdf_bytes: PDF file contents

        Returns:
            ParsedPDFResult (check ``success`` before reading ``data``)
        """
        correlation_id = str(uuid.uuid4())
        log = logger.bind(correlation_id=correlation_id)

        if not pdf_bytes:
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EMPTY_OR_UNREADABLE_PDF, "PDF file is empty"
            )

        if len(pdf_bytes) > self.config.max_pdf_bytes:
            log.warning(
                "PDF exceeds size limit",
                byte_count=len(pdf_bytes),
                max_pdf_bytes=self.config.max_pdf_bytes,
            )
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EMPTY_OR_UNREADABLE_PDF,
                f"PDF exceeds the {self.config.max_pdf_bytes} byte limit",
            )

        try:
            text = extract_text_from_pdf(pdf_bytes)
        except PDFReadError as e:
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EMPTY_OR_UNREADABLE_PDF, str(e)
            )

        return await self._parse(text, correlation_id)

    async def parse_pdf_from_path(self, path: Path | str) -> ParsedPDFResult:
        """Read a PDF from disk and parse it."""
        try:
            pdf_bytes = Path(path).read_bytes()
        except OSError as e:
            logger.error("Could not read PDF file", path=str(path), error=str(e))  # type: ignore[attr-defined]
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EMPTY_OR_UNREADABLE_PDF,
                f"Could not read {path}: {e}",
            )
        return await self.parse_pdf(pdf_bytes)

    async def parse_text(self, text: str) -> ParsedPDFResult:
        """Parse already-extracted report text."""
        return await self._parse(text, str(uuid.uuid4()))

    async def _parse(self, text: str, correlation_id: str) -> ParsedPDFResult:
        log = logger.bind(correlation_id=correlation_id)

        if not text.strip():
            log.warning("PDF contains no extractable text")
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EMPTY_OR_UNREADABLE_PDF,
                "No text could be extracted from the PDF",
            )

        if not is_clifton_strengths_report(text):
            log.warning("Document is not a CliftonStrengths report")
            return ParsedPDFResult.failure(
                ExtractionErrorCode.NOT_A_CLIFTONSTRENGTHS_REPORT,
                "This does not appear to be a CliftonStrengths report",
            )

        try:
            result = None
            if self.config.ai_first:
                result = await self._parse_with_ai(text, correlation_id)
            if result is None:
                result = self._parse_with_regex(text)
            if result is None and not self.config.ai_first:
                result = await self._parse_with_ai(text, correlation_id)
        except Exception as e:
            log.error("Unexpected error during extraction", error=str(e), exc_info=True)
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EXTRACTION_FAILED, f"Extraction failed: {e}"
            )

        if result is None or result.data is None:
            log.warning("No strengths found in report")
            return ParsedPDFResult.failure(
                ExtractionErrorCode.EXTRACTION_FAILED,
                "Could not find any CliftonStrengths themes in the report",
            )

        log.info(
            "PDF parsed",
            extraction_method=result.extraction_method,
            user_name=result.data.name,
            format=result.data.format.value,
            strength_count=len(result.data.strengths),
            leading_domain=result.data.leading_domain.value,
        )
        return result.model_copy(update={"full_text_content": text})

    def _parse_with_regex(self, text: str) -> Optional[ParsedPDFResult]:
        extracted = extract_strengths(text)
        if not extracted:
            return None

        profile = assemble_profile(
            name=extract_user_name(text, placeholder=self.config.unknown_user_name),
            assessment_date=extract_assessment_date(text, today=self.today),
            extracted=extracted,
            config=self.config,
        )
        return ParsedPDFResult(
            success=True,
            data=profile,
            warnings=generate_warnings(text, extracted),
            extraction_method="regex",
        )

    async def _parse_with_ai(
        self, text: str, correlation_id: str
    ) -> Optional[ParsedPDFResult]:
        ai_result = await self.ai_extractor.extract(text, correlation_id=correlation_id)
        if not isinstance(ai_result, AIExtractedProfile):
            return None

        extracted, descriptions = canonical_strengths(ai_result)
        if not extracted:
            logger.warning(  # type: ignore[attr-defined]
                "AI fallback unavailable",
                reason="AI result contained no canonical strength names",
                correlation_id=correlation_id,
            )
            return None

        profile = assemble_profile(
            name=ai_result.user_name,
            assessment_date=parse_ai_date(ai_result.assessment_date, today=self.today),
            extracted=extracted,
            config=self.config,
            descriptions=descriptions,
        )
        return ParsedPDFResult(
            success=True,
            data=profile,
            warnings=generate_warnings(text, extracted),
            additional_user_info=ai_result.additional_info,
            extraction_method="ai",
        )
