"""
Unified AI client — OpenAI-compatible chat completions with fallback.

Provider priority (fixed by configuration order):
  1. Groq      — when GROQ_API_KEY is set
  2. Qwen      — when QWEN_API_KEY is set
  3. Mock      — rule-based responder, always available

Each provider gets up to AI_MAX_ATTEMPTS tries with linear backoff. A 429
swaps in the provider's fallback model for the rest of the process; a 401/403
disables the provider until restart. Any other 4xx moves on to the next
provider without retrying. chat() never raises for provider
failures: when everything is down the mock responder answers.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx
import openai
from openai import AsyncOpenAI

from app.config import Settings, settings
from app.errors import ProviderAuthError, ProviderError, ProviderRequestError, ProviderTransientError
from app.services.mock_responder import MockResponder

logger = logging.getLogger(__name__)

VALID_ROLES = ("system", "user", "assistant")


# ─────────────────────────────────────────────────────────────────────────────
# Provider registry
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ProviderConfig:
    name: str
    base_url: str
    api_key: str
    model: str
    fallback_model: str = ""
    enabled: bool = True


class ProviderRegistry:
    """Ordered, mutable provider list owned by one gateway."""

    def __init__(self, providers: list[ProviderConfig]):
        self._providers = [p for p in providers if p.api_key]

    def available(self) -> list[ProviderConfig]:
        return [p for p in self._providers if p.enabled]

    def get(self, name: str) -> Optional[ProviderConfig]:
        return next((p for p in self._providers if p.name == name), None)

    def disable(self, name: str) -> None:
        provider = self.get(name)
        if provider:
            provider.enabled = False

    def use_fallback_model(self, name: str) -> bool:
        """Switch to the fallback model. Returns False when there is none to switch to."""
        provider = self.get(name)
        if not provider or not provider.fallback_model or provider.model == provider.fallback_model:
            return False
        provider.model = provider.fallback_model
        return True


def providers_from_settings(cfg: Settings) -> list[ProviderConfig]:
    return [
        ProviderConfig(
            name="groq",
            base_url=cfg.GROQ_BASE_URL,
            api_key=cfg.GROQ_API_KEY,
            model=cfg.GROQ_MODEL,
            fallback_model=cfg.GROQ_FALLBACK_MODEL,
        ),
        ProviderConfig(
            name="qwen",
            base_url=cfg.QWEN_BASE_URL,
            api_key=cfg.QWEN_API_KEY,
            model=cfg.QWEN_MODEL,
            fallback_model=cfg.QWEN_FALLBACK_MODEL,
        ),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Gateway
# ─────────────────────────────────────────────────────────────────────────────

class AIGateway:
    def __init__(
        self,
        providers: list[ProviderConfig],
        *,
        timeout: float = 30.0,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        default_params: Optional[dict] = None,
        responder: Optional[MockResponder] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.registry = ProviderRegistry(providers)
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.default_params = default_params or {"temperature": 0.7, "max_tokens": 500, "top_p": 0.9}
        self.responder = responder or MockResponder()
        self._sleep = sleep
        self._clients = {
            p.name: AsyncOpenAI(
                api_key=p.api_key,
                base_url=p.base_url,
                timeout=timeout,
                max_retries=0,  # retries are handled here
                http_client=http_client,
            )
            for p in self.registry.available()
        }
        names = [p.name for p in self.registry.available()] or ["mock"]
        logger.info("AI gateway initialised with providers: %s", ", ".join(names))

    @classmethod
    def from_settings(cls, cfg: Settings, **kwargs) -> "AIGateway":
        return cls(
            providers_from_settings(cfg),
            timeout=cfg.AI_TIMEOUT_SECONDS,
            max_attempts=cfg.AI_MAX_ATTEMPTS,
            retry_delay=cfg.AI_RETRY_DELAY_SECONDS,
            default_params={
                "temperature": cfg.AI_TEMPERATURE,
                "max_tokens": cfg.AI_MAX_TOKENS,
                "top_p": cfg.AI_TOP_P,
            },
            **kwargs,
        )

    # ── Public API ────────────────────────────────────────────────────────────

    async def chat(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
    ) -> str:
        """Send a chat completion and return the reply text.

        Tries each available provider in priority order, then falls through
        to the mock responder. Raises ValueError only for malformed input.
        """
        _validate_messages(messages)
        params = dict(self.default_params)
        for key, value in (("temperature", temperature), ("max_tokens", max_tokens), ("top_p", top_p)):
            if value is not None:
                params[key] = value

        for provider in self.registry.available():
            try:
                return await self._call_provider(provider, messages, params)
            except ProviderError as e:
                logger.warning("%s failed, trying next provider: %s", provider.name, e)

        logger.info("Using mock response (no AI providers available)")
        return self.responder.respond(messages)

    def status(self) -> dict:
        available = [p.name for p in self.registry.available()]
        return {
            "active_provider": available[0] if available else "mock",
            "available_providers": available,
            "is_using_mock": not available,
        }

    def provider_name(self) -> str:
        available = self.registry.available()
        if not available:
            return "none"
        return f"{available[0].name} ({available[0].model})"

    @property
    def provider_count(self) -> int:
        return len(self.registry.available())

    async def health_check(self) -> dict:
        """Live connectivity test — called by /api/health/ai."""
        provider = self.provider_name()
        if provider == "none":
            return {
                "provider": "none",
                "status": "unconfigured",
                "message": "Set GROQ_API_KEY and/or QWEN_API_KEY in backend/.env.",
            }
        reply = await self.chat(
            [
                {"role": "system", "content": "You are a test assistant."},
                {"role": "user", "content": "Reply with exactly: OK"},
            ],
            max_tokens=10,
            temperature=0.0,
        )
        return {"provider": provider, "status": "ok", "test_reply": reply.strip(), **self.status()}

    # ── Provider calls ────────────────────────────────────────────────────────

    async def _call_provider(self, provider: ProviderConfig, messages: list[dict], params: dict) -> str:
        last_error: Optional[ProviderError] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._request(provider, messages, params)
            except ProviderAuthError:
                logger.error("%s authentication failed, disabling provider", provider.name)
                self.registry.disable(provider.name)
                raise
            except ProviderTransientError as e:
                last_error = e
                logger.warning("%s attempt %d/%d failed: %s", provider.name, attempt, self.max_attempts, e)
                if e.status_code == 429 and self.registry.use_fallback_model(provider.name):
                    logger.info("Switching %s to %s due to rate limit", provider.name, provider.model)
                if attempt < self.max_attempts:
                    await self._sleep(self.retry_delay * attempt)
        raise last_error

    async def _request(self, provider: ProviderConfig, messages: list[dict], params: dict) -> str:
        client = self._clients[provider.name]
        try:
            response = await client.chat.completions.create(
                model=provider.model,
                messages=messages,
                **params,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise ProviderAuthError(provider.name, str(e), e.status_code) from e
        except openai.APIStatusError as e:
            if e.status_code == 429 or e.status_code >= 500:
                raise ProviderTransientError(provider.name, str(e), e.status_code) from e
            raise ProviderRequestError(provider.name, str(e), e.status_code) from e
        except openai.APIConnectionError as e:
            # Also covers APITimeoutError.
            raise ProviderTransientError(provider.name, str(e)) from e

        if not response.choices:
            raise ProviderTransientError(provider.name, "empty choices in response")
        return response.choices[0].message.content or ""


def _validate_messages(messages: list[dict]) -> None:
    if not messages:
        raise ValueError("messages must not be empty")
    for m in messages:
        if m.get("role") not in VALID_ROLES:
            raise ValueError(f"invalid message role: {m.get('role')!r}")
        if not isinstance(m.get("content"), str):
            raise ValueError("message content must be a string")


# Default instance used by the API.
gateway = AIGateway.from_settings(settings)


def get_gateway() -> AIGateway:
    """FastAPI dependency returning the process-wide gateway."""
    return gateway
