"""
Gemini API Client

Async wrapper around Google Gemini (via LangChain) with a hard timeout.
Every failure is raised as ExternalServiceError so the caller can switch to
its deterministic path; the client itself never invents text.
"""
from dataclasses import dataclass
from typing import Dict, Any, Optional
from enum import Enum
import asyncio
from datetime import datetime

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from medisense.config import Settings, is_placeholder_credential
from medisense.utils import get_logger, ExternalServiceError

logger = get_logger(__name__)


class GeminiModel(str, Enum):
    """Gemini models the explanation prompt has been used with."""
    FLASH_3_PREVIEW = "gemini-3-flash-preview"
    FLASH_2_5 = "gemini-2.5-flash"
    FLASH_2_5_LITE = "gemini-2.5-flash-lite"
    FLASH_2_0 = "gemini-2.0-flash"


@dataclass
class GeminiConfig:
    """Configuration for Gemini client."""
    api_key: Optional[str] = None
    model: str = GeminiModel.FLASH_3_PREVIEW.value
    temperature: float = 0.3
    max_output_tokens: int = 1024
    request_timeout_seconds: float = 10.0
    # Retries happen inside the timeout budget, so keep them few
    max_retries: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiConfig":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            max_output_tokens=settings.gemini_max_output_tokens,
            request_timeout_seconds=settings.explanation_timeout_seconds,
        )


@dataclass
class GeminiResponse:
    """Structured response from Gemini."""
    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "model": self.model,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "latency_ms": round(self.latency_ms, 2),
        }


class GeminiClient:
    """
    Client for Google Gemini API.

    Constructed once at process start and injected wherever text generation
    is needed. Without a usable credential the client reports itself
    unavailable and never touches the network.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        self.config = config or GeminiConfig()
        self._llm = None
        self._request_count = 0
        self._failure_count = 0
        self._last_request_time: Optional[datetime] = None

        self._initialize()

    def _initialize(self):
        if is_placeholder_credential(self.config.api_key):
            logger.warning("No Gemini API key configured - deterministic explanations only")
            return

        self._llm = ChatGoogleGenerativeAI(
            model=self.config.model,
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_output_tokens,
            timeout=self.config.request_timeout_seconds,
            max_retries=self.config.max_retries,
            google_api_key=self.config.api_key,
        )
        logger.info(f"LangChain Gemini client initialized with model: {self.config.model}")

    @property
    def is_available(self) -> bool:
        """Check if Gemini is available for use."""
        return self._llm is not None

    async def generate_async(
        self,
        prompt: str,
        system_instruction: Optional[str] = None
    ) -> GeminiResponse:
        """
        Generate a response from Gemini.

        Args:
            prompt: The user prompt
            system_instruction: Optional system message sent ahead of the prompt

        Returns:
            GeminiResponse with generated text

        Raises:
            ExternalServiceError: client unavailable, call failed, timed out,
                or returned no text
        """
        if not self.is_available:
            raise ExternalServiceError("Gemini client is not configured")

        messages = [HumanMessage(content=prompt)]
        if system_instruction:
            messages.insert(0, SystemMessage(content=system_instruction))
        start_time = datetime.now()
        self._request_count += 1
        self._last_request_time = start_time

        try:
            response = await asyncio.wait_for(
                self._llm.ainvoke(messages),
                timeout=self.config.request_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self._failure_count += 1
            raise ExternalServiceError(
                f"Gemini call exceeded {self.config.request_timeout_seconds}s",
                details={"reason": "timeout"},
            ) from e
        except Exception as e:
            self._failure_count += 1
            raise ExternalServiceError(
                f"Gemini call failed: {e}",
                details={"reason": type(e).__name__},
            ) from e

        latency = (datetime.now() - start_time).total_seconds() * 1000
        text = self._extract_text(response)
        if not text.strip():
            self._failure_count += 1
            raise ExternalServiceError(
                "Gemini returned an empty response",
                details={"reason": "empty_response"},
            )

        prompt_tokens = 0
        completion_tokens = 0
        usage = getattr(response, "usage_metadata", None)
        if usage:
            prompt_tokens = usage.get("input_tokens", 0)
            completion_tokens = usage.get("output_tokens", 0)

        return GeminiResponse(
            text=text,
            model=self.config.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency,
        )

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Pull plain text out of a LangChain message."""
        content = response.content if hasattr(response, "content") else response
        if isinstance(content, str):
            return content
        # Newer Gemini models return a list of content blocks
        if isinstance(content, list):
            parts = []
            for block in content:
                if isinstance(block, str):
                    parts.append(block)
                elif isinstance(block, dict) and block.get("type") == "text":
                    parts.append(block.get("text", ""))
            return "".join(parts)
        return "" if content is None else str(content)

    def get_stats(self) -> Dict[str, Any]:
        """Get client statistics."""
        return {
            "is_available": self.is_available,
            "model": self.config.model,
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "last_request": self._last_request_time.isoformat() if self._last_request_time else None
        }
