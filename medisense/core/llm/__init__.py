"""
LLM Explanation Module

Gemini explains an already-selected route; it is NON-DECISIONAL.

ARCHITECTURE CONSTRAINTS:
- LLM receives: computed scores, raw risk/priority inputs, the chosen route
- LLM DOES NOT output: scores, route choices, time-saved figures
- Without a credential, or on any Gemini failure, a rule-based report is used
"""
from .gemini_client import GeminiClient, GeminiConfig, GeminiResponse
from .explanation import (
    ExplanationGenerator,
    ExplanationContext,
    ExplanationReport,
    ExplanationPath,
    FallbackReason,
)

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiResponse",
    "ExplanationGenerator",
    "ExplanationContext",
    "ExplanationReport",
    "ExplanationPath",
    "FallbackReason",
]
