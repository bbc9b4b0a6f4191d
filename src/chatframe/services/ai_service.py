"""OpenAI SDK wrapper for chat completions."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    RateLimitError,
)

from ..config import AIConfig

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """A completion failed; the message is safe to show to the user."""

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


def create_ai_service(config: AIConfig) -> "AIService":
    return AIService(config)


class AIService:
    def __init__(self, config: AIConfig) -> None:
        self.config = config
        self._build_client()

    def _build_client(self) -> None:
        timeout = httpx.Timeout(
            connect=float(self.config.connect_timeout),
            read=float(self.config.request_timeout),
            write=30.0,
            pool=10.0,
        )
        # SECURITY-REVIEW: verify=False only when user explicitly sets verify_ssl: false in config
        http_client = httpx.AsyncClient(verify=self.config.verify_ssl, timeout=timeout)
        self.client = AsyncOpenAI(
            base_url=self.config.base_url,
            api_key=self.config.api_key,
            http_client=http_client,
        )

    def _with_system_prompt(self, messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not self.config.system_prompt:
            return list(messages)
        return [{"role": "system", "content": self.config.system_prompt}, *messages]

    async def complete(self, messages: list[dict[str, Any]]) -> str:
        """Send the conversation so far and return the assistant's reply text."""
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=self._with_system_prompt(messages),
            )
        except AuthenticationError as e:
            logger.error("Authentication failed")
            raise AIServiceError("Authentication failed. Check your API key.") from e
        except APITimeoutError as e:
            logger.warning("Request timed out after %ss", self.config.request_timeout)
            raise AIServiceError("Request timed out. The API may be slow or unreachable.", retryable=True) from e
        except APIConnectionError as e:
            logger.warning("Cannot connect to API at %s", self.config.base_url)
            raise AIServiceError(
                f"Cannot connect to API at {self.config.base_url}. Check the URL and your network connection.",
                retryable=True,
            ) from e
        except RateLimitError as e:
            logger.warning("Rate limited by AI provider: %s", e)
            raise AIServiceError("Rate limited by API provider", retryable=True) from e
        except BadRequestError as e:
            if "context_length" in str(e).lower():
                logger.warning("Context length exceeded: %s", e)
                raise AIServiceError("Conversation too long for model context window.") from e
            logger.exception("AI bad request error")
            raise AIServiceError("AI request error") from e
        except APIStatusError as e:
            logger.warning("API error %d: %s", e.status_code, type(e).__name__)
            raise AIServiceError(f"API error ({e.status_code})", retryable=e.status_code >= 500) from e

        if not response.choices:
            logger.warning("Completion returned no choices")
            return ""
        return response.choices[0].message.content or ""

    async def validate_connection(self) -> tuple[bool, str, list[str]]:
        try:
            models = await self.client.models.list()
            model_ids = [m.id for m in models.data]
            return True, "Connected successfully", model_ids
        except AuthenticationError:
            logger.error("Authentication failed during connection validation")
            return False, "Authentication failed. Check your API key.", []
        except APITimeoutError:
            logger.warning("Connection validation timed out")
            return False, "Connection timed out. The API may be slow or unreachable.", []
        except APIConnectionError:
            logger.warning("Cannot connect to API at %s", self.config.base_url)
            return (
                False,
                f"Cannot connect to API at {self.config.base_url}. Check the URL and your network connection.",
                [],
            )
        except Exception as e:
            logger.error("AI connection validation failed: %s", e)
            return False, "Connection to AI service failed", []
