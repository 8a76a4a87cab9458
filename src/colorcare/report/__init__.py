"""ColorCare Report — caregiver summaries and encouragement text."""

from colorcare.report.backends import (
    ModelUnavailableError,
    OpenAIBackend,
    ReportError,
    TextBackend,
)
from colorcare.report.generator import ReportGenerator
from colorcare.report.prompts import ENCOURAGEMENT_PROMPT, build_analysis_prompt

__all__ = [
    "ENCOURAGEMENT_PROMPT",
    "ModelUnavailableError",
    "OpenAIBackend",
    "ReportError",
    "ReportGenerator",
    "TextBackend",
    "build_analysis_prompt",
]
