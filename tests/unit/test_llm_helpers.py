"""
Unit tests for llm_helpers module.
"""

import pytest
from unittest.mock import AsyncMock

from strengths_coach.utils.llm_helpers import (
    DEFAULT_SYSTEM_PROMPT,
    _build_options,
    call_llm,
    call_llm_with_retry,
    extract_json_from_markdown,
    stream_llm,
)


def _fake_stream(chunks):
    async def _iter(*args, **kwargs):
        for chunk in chunks:
            yield chunk

    return _iter


class TestExtractJsonFromMarkdown:
    """Test cases for extract_json_from_markdown function."""

    def test_plain_json_unchanged(self):
        """Test that bare JSON passes through."""
        assert extract_json_from_markdown('{"a": 1}') == '{"a": 1}'

    def test_strips_json_fence(self):
        """Test that ```json fences are removed."""
        # Arrange
        response = '```json\n{"userName": "Dana"}\n```'

        # Act & Assert
        assert extract_json_from_markdown(response) == '{"userName": "Dana"}'

    def test_strips_plain_fence(self):
        """Test that bare ``` fences are removed."""
        assert extract_json_from_markdown('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_surrounding_prose(self):
        """Test that text around the outermost braces is dropped."""
        # Arrange
        response = 'Sure! Here it is: {"a": {"b": 2}} Let me know.'

        # Act & Assert
        assert extract_json_from_markdown(response) == '{"a": {"b": 2}}'

    def test_no_braces_returns_stripped_text(self):
        """Test that text without an object is returned stripped."""
        assert extract_json_from_markdown("  no json here  ") == "no json here"


class TestBuildOptions:
    """Test cases for the Claude SDK options builder."""

    def test_defaults_to_neutral_system_prompt(self):
        """Test the default system prompt and tool-free configuration."""
        # Act
        options = _build_options(None, None, 1)

        # Assert
        assert options.system_prompt == DEFAULT_SYSTEM_PROMPT
        assert options.allowed_tools == []
        assert options.max_turns == 1

    def test_custom_system_prompt_and_model(self):
        """Test that caller settings are passed through."""
        # Act
        options = _build_options("You are a coach.", "claude-sonnet-4-5", 2)

        # Assert
        assert options.system_prompt == "You are a coach."
        assert options.model == "claude-sonnet-4-5"
        assert options.max_turns == 2


class TestCallLLM:
    """Test cases for call_llm function."""

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self, mocker):
        """Test that streamed text blocks are concatenated and stripped."""
        # Arrange
        mocker.patch(
            "strengths_coach.utils.llm_helpers._iter_response_text",
            new=_fake_stream(["  Hello ", "world  "]),
        )

        # Act
        result = await call_llm("prompt")

        # Assert
        assert result == "Hello world"

    @pytest.mark.asyncio
    async def test_empty_response_raises(self, mocker):
        """Test that an empty reply raises ValueError."""
        # Arrange
        mocker.patch(
            "strengths_coach.utils.llm_helpers._iter_response_text",
            new=_fake_stream([]),
        )

        # Act & Assert
        with pytest.raises(ValueError, match="empty response"):
            await call_llm("prompt")

    @pytest.mark.asyncio
    async def test_stream_llm_yields_chunks(self, mocker):
        """Test that stream_llm yields each chunk in order."""
        # Arrange
        mocker.patch(
            "strengths_coach.utils.llm_helpers._iter_response_text",
            new=_fake_stream(["a", "b", "c"]),
        )

        # Act
        chunks = [c async for c in stream_llm("prompt")]

        # Assert
        assert chunks == ["a", "b", "c"]


class TestCallLLMWithRetry:
    """Test cases for call_llm_with_retry function."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self, mocker):
        """Test that a successful call is returned without retrying."""
        # Arrange
        mock_call = mocker.patch(
            "strengths_coach.utils.llm_helpers.call_llm",
            new_callable=AsyncMock,
            return_value="answer",
        )

        # Act
        result = await call_llm_with_retry("prompt", system_prompt="sys", max_retries=3)

        # Assert
        assert result == "answer"
        mock_call.assert_awaited_once()
        assert mock_call.call_args[1]["system_prompt"] == "sys"

    @pytest.mark.asyncio
    async def test_retries_connection_errors(self, mocker):
        """Test that connection errors are retried."""
        # Arrange
        mock_call = mocker.patch(
            "strengths_coach.utils.llm_helpers.call_llm",
            new_callable=AsyncMock,
            side_effect=[ConnectionError("reset"), "recovered"],
        )

        # Act
        result = await call_llm_with_retry("prompt", max_retries=2)

        # Assert
        assert result == "recovered"
        assert mock_call.await_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_value_errors(self, mocker):
        """Test that non-transient errors are raised immediately."""
        # Arrange
        mock_call = mocker.patch(
            "strengths_coach.utils.llm_helpers.call_llm",
            new_callable=AsyncMock,
            side_effect=ValueError("LLM returned empty response"),
        )

        # Act & Assert
        with pytest.raises(ValueError):
            await call_llm_with_retry("prompt", max_retries=3)
        assert mock_call.await_count == 1
