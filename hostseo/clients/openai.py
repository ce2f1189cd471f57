"""OpenAI chat completions client for article generation."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from hostseo.core.errors import (
    ConfigError,
    EmptyResponseError,
    ServiceError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
TEMPERATURE = 0.3


class OpenAIClient:
    """Client for the OpenAI chat completions API.

    One request per call: no retries and no model fallbacks. Failures are
    raised as ``GenerationError`` subclasses so callers can skip the topic.
    """

    def __init__(self, api_key: Optional[str], model: str = None, settings=None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Model to use (defaults to the configured model)
            settings: Settings instance for configuration values
        """
        self.api_key = api_key or ""
        self.base_url = "https://api.openai.com/v1"
        if settings:
            self.model = model or settings.openai_model
            self.max_tokens = settings.openai_max_tokens
            self.timeout = settings.openai_timeout
        else:
            self.model = model or DEFAULT_MODEL
            self.max_tokens = 1600
            self.timeout = 80.0

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, system: str, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": max_tokens,
        }

    async def complete(
        self, system: str, prompt: str, max_tokens: Optional[int] = None
    ) -> str:
        """Generate text for a system instruction and user prompt.

        Args:
            system: System instruction
            prompt: User prompt
            max_tokens: Output token budget (defaults to the configured one)

        Returns:
            The generated text, unmodified

        Raises:
            ConfigError: No API key configured; no request is made
            TransportError: The request could not complete
            ServiceError: The API answered with a non-200 status
            EmptyResponseError: The API answered 200 without usable text
        """
        if not self.api_key:
            raise ConfigError("OpenAI API key not configured.")

        payload = self._payload(system, prompt, max_tokens or self.max_tokens)
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=payload,
                ) as response:
                    status = response.status
                    text = await response.text()
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"OpenAI request timed out after {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Network error calling OpenAI: {e}") from e

        if status != 200:
            raise ServiceError(status, text)

        content = self._extract_content(text)
        if not content:
            raise EmptyResponseError("OpenAI returned no content.")
        return content

    @staticmethod
    def _extract_content(text: str) -> str:
        try:
            data = json.loads(text)
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.debug(f"Unusable OpenAI response body: {e}")
            return ""
        return content if isinstance(content, str) else ""

    async def test_connection(self) -> bool:
        """Test the OpenAI API connection.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            await self.complete("Reply with OK.", "Hello, world!", max_tokens=5)
        except ConfigError:
            logger.error("OpenAI API key not configured")
            return False
        except (TransportError, ServiceError, EmptyResponseError) as e:
            logger.error(f"OpenAI API connection failed: {e}")
            return False

        logger.info("OpenAI API connection successful")
        return True


async def complete(
    api_key: Optional[str], system_instruction: str, user_prompt: str, settings=None
) -> str:
    """Module-level shortcut for a single generation call."""
    client = OpenAIClient(api_key, settings=settings)
    return await client.complete(system_instruction, user_prompt)
