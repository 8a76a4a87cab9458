"""Text-generation backends and their error types.

A backend turns ``(model, prompt)`` into text. ``ModelUnavailableError``
marks the rate-limit / unknown-model class of failure that callers may
answer by switching models; every other failure is a plain ``ReportError``.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol

logger = logging.getLogger(__name__)

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class ReportError(Exception):
    """Base exception for text-generation failures."""


class ModelUnavailableError(ReportError):
    """Raised when a model is rate limited or does not exist."""

    def __init__(self, model: str, reason: str | None = None) -> None:
        msg = f"Model unavailable: {model}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.model = model
        self.reason = reason


class TextBackend(Protocol):
    """Anything that can complete a prompt with a named model."""

    def complete(self, model: str, prompt: str) -> str: ...


def _require_openai() -> Any:
    """Import and return the openai module, or raise a helpful error."""
    try:
        import openai

        return openai
    except ImportError:
        raise ImportError(
            "openai is required for report generation. "
            "Install it with: pip install openai"
        ) from None


class OpenAIBackend:
    """Chat-completions backend using the ``openai`` SDK.

    Works against any OpenAI-compatible endpoint; the default base URL is
    Gemini's compatibility layer.

    Args:
        api_key: API key for the endpoint.
        base_url: Endpoint root URL.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = GEMINI_OPENAI_BASE_URL,
        timeout: float = 60.0,
    ) -> None:
        if not api_key:
            raise ReportError("An API key is required for report generation")
        openai = _require_openai()
        self._openai = openai
        self._client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    @classmethod
    def from_env(
        cls,
        api_key_env: str = "GEMINI_API_KEY",
        base_url: str | None = GEMINI_OPENAI_BASE_URL,
    ) -> OpenAIBackend:
        """Build a backend from the API key in ``api_key_env``.

        Raises:
            ReportError: If the variable is unset or empty.
        """
        api_key = os.environ.get(api_key_env, "")
        if not api_key:
            raise ReportError(f"{api_key_env} is not configured")
        return cls(api_key=api_key, base_url=base_url)

    def complete(self, model: str, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text.

        Raises:
            ModelUnavailableError: On rate limiting (429) or unknown model (404).
            ReportError: On any other API failure or an empty reply.
        """
        openai = self._openai
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
            )
        except (openai.RateLimitError, openai.NotFoundError) as e:
            raise ModelUnavailableError(model, str(e)) from e
        except openai.APIError as e:
            raise ReportError(f"Text generation failed with {model}: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ReportError(f"Empty response from {model}")
        return response.choices[0].message.content.strip()
