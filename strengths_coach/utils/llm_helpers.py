"""
LLM Helpers Module

Centralized Claude access for the AI extraction fallback and the coaching
service. All LLM calls go through this module.

Example Usage:
    from strengths_coach.utils.llm_helpers import call_llm, call_llm_with_retry

    # Single attempt (AI extraction fallback)
    raw = await call_llm(prompt, correlation_id=correlation_id)

    # Retried with exponential backoff (coaching)
    reply = await call_llm_with_retry(
        prompt, system_prompt=system_prompt, max_retries=3
    )
"""

import logging
from typing import AsyncIterator, Optional

import structlog
from tenacity import (
    AsyncRetrying,
    after_log,
    before_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are an expert text analyst. Respond directly to user prompts "
    "with the requested analysis."
)


def extract_json_from_markdown(response_text: str) -> str:
    """Extract a JSON object from an LLM response.

    Removes markdown code block markers and any prose around the outermost
    ``{...}`` pair.

    Args:
        response_text: Raw text response from LLM

    Returns:
        Clean JSON string (unchanged text when no braces are present)
    """
    json_text = response_text.strip()

    if json_text.startswith("```json"):
        json_text = json_text[7:]
    elif json_text.startswith("```"):
        json_text = json_text[3:]

    if json_text.endswith("```"):
        json_text = json_text[:-3]

    json_text = json_text.strip()

    start = json_text.find("{")
    end = json_text.rfind("}")
    if start != -1 and end > start:
        json_text = json_text[start : end + 1]

    return json_text


def _build_options(system_prompt: Optional[str], model: Optional[str], max_turns: int):
    from claude_agent_sdk import ClaudeAgentOptions

    # Pure text generation: no tools, no project settings
    return ClaudeAgentOptions(
        max_turns=max_turns,
        allowed_tools=[],
        system_prompt=system_prompt or DEFAULT_SYSTEM_PROMPT,
        setting_sources=None,
        model=model,
    )


async def _iter_response_text(
    prompt: str, system_prompt: Optional[str], model: Optional[str], max_turns: int
) -> AsyncIterator[str]:
    from claude_agent_sdk import ClaudeSDKClient

    options = _build_options(system_prompt, model, max_turns)

    async with ClaudeSDKClient(options=options) as client:
        await client.query(prompt)

        async for message in client.receive_response():
            if hasattr(message, "content") and message.content:
                for block in message.content:
                    if hasattr(block, "text"):
                        yield block.text


async def call_llm(
    prompt: str,
    system_prompt: Optional[str] = None,
    model: Optional[str] = None,
    max_turns: int = 1,
    correlation_id: Optional[str] = None,
) -> str:
    """
    Call Claude once and return the full text response.

    Args:
        prompt: The formatted prompt to send
        system_prompt: System prompt (defaults to a neutral analyst prompt)
        model: Claude model name (SDK default when None)
        max_turns: Conversation turns allowed for the call
        correlation_id: Optional correlation ID for logging

    Returns:
        Stripped response text

    Raises:
        ValueError: If the model returned no text
        Exception: Any SDK/transport error is logged and re-raised
    """
    log = logger.bind(correlation_id=correlation_id) if correlation_id else logger

    log.debug("LLM call initiated", prompt_length=len(prompt), model=model)

    try:
        response_text = ""
        async for chunk in _iter_response_text(prompt, system_prompt, model, max_turns):
            response_text += chunk

        if not response_text:
            raise ValueError("LLM returned empty response")

        log.debug("LLM call succeeded", response_length=len(response_text))
        return response_text.strip()

    except Exception as e:
        log.error("LLM call failed", error=str(e), prompt_length=len(prompt))
        raise


async def call_llm_with_retry(
    prompt: str,
    system_prompt: Optional[str] = None,
    model: Optional[str] = None,
    max_turns: int = 1,
    max_retries: int = 3,
    correlation_id: Optional[str] = None,
) -> str:
    """
    Call Claude with exponential backoff on connection errors and timeouts.

    Waits 2s, 4s, 8s (capped at 10s) between attempts. Other errors are not
    retried.

    Raises:
        Exception: The last error once all attempts fail
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        before=before_log(logger, logging.INFO),
        after=after_log(logger, logging.INFO),
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            return await call_llm(
                prompt,
                system_prompt=system_prompt,
                model=model,
                max_turns=max_turns,
                correlation_id=correlation_id,
            )

    raise RuntimeError("unreachable: tenacity exhausted without raising")


async def stream_llm(
    prompt: str,
    system_prompt: Optional[str] = None,
    model: Optional[str] = None,
    max_turns: int = 1,
    correlation_id: Optional[str] = None,
) -> AsyncIterator[str]:
    """
    Stream Claude's response text block by block.

    Yields:
        Text chunks in arrival order
    """
    log = logger.bind(correlation_id=correlation_id) if correlation_id else logger
    log.debug("LLM stream initiated", prompt_length=len(prompt), model=model)

    async for chunk in _iter_response_text(prompt, system_prompt, model, max_turns):
        yield chunk
