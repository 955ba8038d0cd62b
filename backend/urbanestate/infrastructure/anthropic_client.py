"""Resilient Anthropic Client — wraps AsyncAnthropic with retry, backoff, JSON extraction and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, 529 overloaded, connection): max_retries retries with exponential backoff
    - Client errors (4xx except 429) and timeouts: immediate failure, no retry
    - All failures mapped to AIProviderError (core/errors.py)
    - generate_json either returns a dict or raises AIProviderError — never partial text

Design Decisions:
    - Wrapper over raw client: services only see generate_text / generate_json
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - JSON extraction with fallback levels (direct, fenced/embedded block): models
      often wrap JSON in markdown even when told not to
"""

import asyncio
import json
import random
import logging
import re

import anthropic
from anthropic import (
    APIError,
    APIConnectionError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
    InternalServerError,
)

from urbanestate.core.errors import AIProviderError, ErrorContext

logger = logging.getLogger(__name__)

# OverloadedError (HTTP 529) is detected via status code on APIStatusError
_OVERLOADED_STATUS = 529

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def _is_overloaded(e: APIError) -> bool:
    """Check if error is Anthropic 529 Overloaded."""
    return isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS


def parse_json_response(text: str) -> dict | None:
    """Extract a JSON object from model text. Handles markdown wrapping.

    Fallback levels:
    1. Direct json.loads
    2. Regex: extract the outermost {...} block
    3. None — caller decides whether that is an error
    """
    text = text.strip()

    # Level 1: direct parse
    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Level 2: extract JSON block (handles ```json ... ``` wrapping)
    match = _JSON_BLOCK.search(text)
    if match:
        try:
            parsed = json.loads(match.group())
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

    # Level 3: nothing usable
    return None


def extract_text(response) -> str:
    """Concatenate the text blocks of a Messages API response."""
    return "".join(
        getattr(block, "text", "") for block in response.content
        if getattr(block, "type", None) == "text"
    )


class ResilientAnthropicClient:
    """Wraps Anthropic client with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        timeout_seconds: int = 60,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        system: str,
        messages: list,
        temperature: float | None = None,
        context: ErrorContext | None = None,
    ):
        """Create message with automatic retry on transient failures."""
        kwargs = {
            "model": model, "max_tokens": max_tokens,
            "system": system, "messages": messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.messages.create(**kwargs)
                self._log_success(response, attempt)
                return response

            except RateLimitError as e:
                await self._handle_rate_limit(e, attempt, context)

            # APITimeoutError subclasses APIConnectionError: keep it first
            except APITimeoutError:
                raise AIProviderError(
                    "API timeout", "timeout", context=context,
                )

            except (APIConnectionError, InternalServerError) as e:
                await self._handle_transient_error(e, attempt, context)

            except APIError as e:
                if _is_overloaded(e):
                    await self._handle_transient_error(e, attempt, context)
                    continue
                raise AIProviderError(
                    str(e), "client_error", context=context,
                )

            except Exception as e:
                logger.error(
                    f"Unexpected Anthropic error: {e}", exc_info=True,
                )
                raise AIProviderError(
                    str(e), "unknown", context=context,
                )

    async def generate_text(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float | None = None,
        context: ErrorContext | None = None,
    ) -> str:
        """Single-turn completion returning the concatenated text."""
        response = await self.create_message(
            model=model, max_tokens=max_tokens, system=system,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature, context=context,
        )
        text = extract_text(response)
        if not text:
            raise AIProviderError(
                "Empty response from model", "empty_response", context=context,
            )
        return text

    async def generate_json(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float | None = None,
        context: ErrorContext | None = None,
    ) -> dict:
        """Single-turn completion parsed as a JSON object."""
        text = await self.generate_text(
            model=model, system=system, prompt=prompt,
            max_tokens=max_tokens, temperature=temperature, context=context,
        )
        parsed = parse_json_response(text)
        if parsed is None:
            logger.warning(f"Model returned non-JSON response: {text[:200]!r}")
            raise AIProviderError(
                "Model returned non-JSON response", "invalid_response",
                context=context,
            )
        return parsed

    def _log_success(self, response, attempt: int) -> None:
        """Log successful API call with token usage."""
        usage = response.usage
        logger.info(
            "Anthropic API success",
            extra={
                "attempt": attempt + 1,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )

    async def _handle_rate_limit(
        self, e: RateLimitError, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Handle rate limit error with retry or raise."""
        retry_after_ms = self._extract_retry_after(e)
        if attempt >= self.max_retries:
            raise AIProviderError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Rate limit hit, retry after {delay}ms (attempt {attempt + 1})",
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: Exception, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise AIProviderError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(f"Transient error, retry after {delay}ms: {e}")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, error: RateLimitError) -> int | None:
        """Extract Retry-After header (returns milliseconds)."""
        response = getattr(error, "response", None)
        if response is None:
            return None
        val = response.headers.get("retry-after")
        if not val:
            return None
        try:
            return int(float(val) * 1000)
        except ValueError:
            return None
