"""
Model providers for the optional language-model path.

One class per wire protocol, each exposing ``complete(prompt) -> str``:
- OpenAIChatProvider: chat completions (gpt-4)
- AnthropicMessagesProvider: messages API (claude)
- LocalGenerateProvider: Ollama-style /api/generate over httpx (local-llm)

Every failure is re-raised as ModelTransportError so the analyzer can
fall back without knowing which SDK was involved.
"""

from abc import ABC, abstractmethod

import anthropic
import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI, OpenAIError

from clinical_diagrams.config.config import Settings, get_settings
from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.exceptions import ConfigurationError, ModelSchemaError, ModelTransportError
from clinical_diagrams.models.llm_models import LLMConfig

logger = get_logger(__name__)


class LLMProvider(ABC):
    """A single outbound completion call."""

    name: str = "unknown"

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send the prompt and return the raw text reply."""


class OpenAIChatProvider(LLMProvider):

    name = "openai"

    def __init__(self, config: LLMConfig, model_name: str):
        self.config = config
        self.model_name = model_name
        self._client: AsyncOpenAI | None = None

    @property
    def client(self) -> AsyncOpenAI:
        """Lazily initialized so that building the provider never touches the network."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.endpoint or None,
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except OpenAIError as e:
            raise ModelTransportError(f"OpenAI request failed: {e}", provider=self.name) from e

        if not response.choices:
            raise ModelSchemaError("OpenAI reply has no choices")
        return response.choices[0].message.content or ""


class AnthropicMessagesProvider(LLMProvider):

    name = "anthropic"

    def __init__(self, config: LLMConfig, model_name: str):
        self.config = config
        self.model_name = model_name
        self._client: AsyncAnthropic | None = None

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(
                api_key=self.config.api_key,
                base_url=self.config.endpoint or None,
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model_name,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as e:
            raise ModelTransportError(f"Anthropic request failed: {e}", provider=self.name) from e

        return "".join(block.text for block in response.content if block.type == "text")


class LocalGenerateProvider(LLMProvider):
    """
    Local model server speaking the Ollama generate protocol.

    Request: {"model", "prompt", "stream": false, "options"}; reply field
    "response" carries the text.
    """

    name = "local"

    def __init__(
        self,
        config: LLMConfig,
        model_name: str,
        endpoint: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.model_name = model_name
        self.endpoint = config.endpoint or endpoint
        self._transport = transport

    async def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.max_tokens,
            },
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.endpoint, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ModelTransportError(
                f"Local model returned HTTP {e.response.status_code}",
                provider=self.name,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise ModelTransportError(f"Local model request failed: {e}", provider=self.name) from e
        except ValueError as e:
            raise ModelSchemaError(f"Local model reply is not JSON: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise ModelSchemaError("Local model reply has no 'response' text")
        return text


def build_provider(config: LLMConfig, settings: Settings | None = None) -> LLMProvider:
    """
    Build the provider for the configured model family.

    Raises:
        ConfigurationError: cloud model without an API key.
    """
    settings = settings or get_settings()

    if config.model == "local-llm":
        return LocalGenerateProvider(config, settings.local_model_name, settings.local_endpoint)

    if not config.api_key:
        raise ConfigurationError(
            f"Model '{config.model}' requires an API key",
            setting="llm_api_key",
        )

    if config.model == "gpt-4":
        return OpenAIChatProvider(config, settings.openai_model_name)
    if config.model == "claude":
        return AnthropicMessagesProvider(config, settings.anthropic_model_name)

    raise ConfigurationError(f"Unsupported model '{config.model}'", setting="llm_model")
