"""ReportGenerator — caregiver summaries with a fallback model."""

from __future__ import annotations

import logging

from colorcare.report.backends import ModelUnavailableError, TextBackend
from colorcare.report.prompts import ENCOURAGEMENT_PROMPT, build_analysis_prompt
from colorcare.session.metrics import SessionMetrics

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_MODEL = "gemini-2.5-flash"
DEFAULT_FALLBACK_MODEL = "gemini-1.5-flash"


class ReportGenerator:
    """Generate natural-language text from session metrics.

    If the primary model is rate limited or missing, the request is retried
    once with the fallback model. Any other error propagates.

    Args:
        backend: Text backend used for every request.
        primary_model: Model tried first.
        fallback_model: Model tried after a ModelUnavailableError, or None
            to disable the fallback.
    """

    def __init__(
        self,
        backend: TextBackend,
        primary_model: str = DEFAULT_PRIMARY_MODEL,
        fallback_model: str | None = DEFAULT_FALLBACK_MODEL,
    ) -> None:
        if not primary_model:
            raise ValueError("primary_model must not be empty")
        self._backend = backend
        self.primary_model = primary_model
        self.fallback_model = fallback_model

    def generate(self, prompt: str) -> str:
        """Complete ``prompt``, falling back to the secondary model if needed.

        Raises:
            ReportError: If generation fails (including on the fallback).
        """
        try:
            return self._backend.complete(self.primary_model, prompt)
        except ModelUnavailableError as e:
            if not self.fallback_model or self.fallback_model == self.primary_model:
                raise
            logger.info(
                "%s unavailable (%s), retrying with %s",
                self.primary_model, e.reason or "no detail", self.fallback_model,
            )
            return self._backend.complete(self.fallback_model, prompt)

    def analyze(self, metrics: SessionMetrics, context: str | None = None) -> str:
        """Three-sentence caregiver summary of a session."""
        return self.generate(build_analysis_prompt(metrics, context))

    def encourage(self) -> str:
        """Short encouragement message shown after an idle nudge."""
        return self.generate(ENCOURAGEMENT_PROMPT)
