"""
LLM client abstraction -- provider-agnostic async wrapper.

Supported providers:
  mock      -- echo back the prompt (for tests / offline dev)
  openai    -- OpenAI Chat Completions (gpt-4o-mini default)
  anthropic -- Anthropic Messages (claude-3-haiku default)

Each attempt is bounded by ``llm_timeout_seconds``; provider errors and
timeouts are retried up to ``llm_max_retries`` times.  Configuration errors
(missing key, missing SDK, unknown provider) are raised immediately.

Configuration is read from Settings (env / .env).
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from src.core.config import get_settings
from src.core.logging import get_logger

logger = get_logger(__name__)


class LLMConfigurationError(RuntimeError):
    """Provider cannot be used at all (no key, SDK not installed)."""


async def _call_mock(prompt: str) -> str:
    logger.info("LLM mock mode -- returning echo")
    return f"[MOCK] {prompt[:200]}"


async def _call_openai(prompt: str) -> str:
    """Call OpenAI Chat Completions API."""
    settings = get_settings()
    api_key = settings.openai_api_key
    if not api_key:
        raise LLMConfigurationError(
            "openai_api_key is not set.  "
            "Set OPENAI_API_KEY in your .env file or environment."
        )

    try:
        import openai  # type: ignore[import-untyped]
    except ImportError as exc:
        raise LLMConfigurationError(
            "The 'openai' package is not installed.  "
            "Run: pip install openai"
        ) from exc

    client = openai.AsyncOpenAI(api_key=api_key, max_retries=0)
    response = await client.chat.completions.create(
        model=settings.openai_model,
        messages=[
            {"role": "system", "content": "You are a dashboard AI assistant."},
            {"role": "user", "content": prompt},
        ],
        temperature=0.0,
        max_tokens=1024,
    )
    text = response.choices[0].message.content or ""
    logger.info("OpenAI response (%d chars)", len(text))
    return text


async def _call_anthropic(prompt: str) -> str:
    """Call Anthropic Messages API."""
    settings = get_settings()
    api_key = settings.anthropic_api_key
    if not api_key:
        raise LLMConfigurationError(
            "anthropic_api_key is not set.  "
            "Set ANTHROPIC_API_KEY in your .env file or environment."
        )

    try:
        import anthropic  # type: ignore[import-untyped]
    except ImportError as exc:
        raise LLMConfigurationError(
            "The 'anthropic' package is not installed.  "
            "Run: pip install anthropic"
        ) from exc

    client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
    response = await client.messages.create(
        model=settings.anthropic_model,
        max_tokens=1024,
        messages=[{"role": "user", "content": prompt}],
    )
    text = response.content[0].text if response.content else ""
    logger.info("Anthropic response (%d chars)", len(text))
    return text


_PROVIDERS: dict[str, Callable[[str], Awaitable[str]]] = {
    "mock": _call_mock,
    "openai": _call_openai,
    "anthropic": _call_anthropic,
}


def available_providers() -> list[str]:
    return list(_PROVIDERS)


async def call_llm(prompt: str, provider: str | None = None) -> str:
    """Send *prompt* to the configured (or overridden) LLM provider.

    Parameters
    ----------
    prompt : str
        The full prompt text.
    provider : str, optional
        Override the provider from settings.  One of: mock, openai, anthropic.

    Raises
    ------
    NotImplementedError
        Unknown provider.
    LLMConfigurationError
        Provider is not usable (missing key / SDK).
    asyncio.TimeoutError
        Every attempt timed out.
    Exception
        The provider's last error once retries are exhausted.
    """
    settings = get_settings()
    if provider is None:
        provider = settings.llm_provider.lower()

    fn = _PROVIDERS.get(provider)
    if fn is None:
        raise NotImplementedError(
            f"LLM provider '{provider}' is not supported.  "
            f"Choose from: {', '.join(_PROVIDERS)}"
        )

    attempts = max(settings.llm_max_retries, 0) + 1
    last_exc: Exception | None = None
    for attempt in range(1, attempts + 1):
        logger.info("Calling LLM provider=%s  prompt_len=%d  attempt=%d/%d",
                    provider, len(prompt), attempt, attempts)
        try:
            return await asyncio.wait_for(fn(prompt), timeout=settings.llm_timeout_seconds)
        except LLMConfigurationError:
            raise
        except Exception as exc:
            last_exc = exc
            logger.warning("LLM attempt %d/%d failed: %s", attempt, attempts, exc or type(exc).__name__)

    assert last_exc is not None
    raise last_exc
