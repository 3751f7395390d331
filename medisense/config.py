"""
MediSense - Application Configuration

Secrets come from the project-level .env file (python-dotenv), everything
else from MEDISENSE_* environment variables via pydantic-settings.
"""
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

# Values shipped in .env templates; treated the same as a missing key
PLACEHOLDER_API_KEYS = frozenset({
    "MY_GEMINI_API_KEY",
    "YOUR_GEMINI_API_KEY",
    "YOUR_API_KEY",
    "your-api-key-here",
    "changeme",
})


def is_placeholder_credential(value: Optional[str]) -> bool:
    """True when a credential is missing, blank or a known template value."""
    if value is None:
        return True
    value = value.strip()
    return not value or value in PLACEHOLDER_API_KEYS


class Settings(BaseSettings):
    """Central configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MEDISENSE_",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Service ──
    app_name: str = Field(default="MediSense Logistics API")
    version: str = Field(default="2.2.0")
    debug: bool = Field(default=False)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # ── Logging ──
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    # ── Gemini ──
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "gemini_api_key"),
        description="Credential for the external explanation path",
    )
    gemini_model: str = Field(default="gemini-3-flash-preview")
    gemini_temperature: float = Field(default=0.3)
    gemini_max_output_tokens: int = Field(default=1024)
    explanation_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Upper bound on one Gemini call before falling back"
    )

    # ── Optimization ──
    time_saved_strategy: Literal["first_alternative", "second_best"] = Field(
        default="first_alternative",
        description="Comparison route for time saved; see TimeSavedStrategy",
    )

    # ── Simulation ──
    telemetry_seed: Optional[int] = Field(
        default=None, description="Seed for mock telemetry; unset draws fresh entropy"
    )

    @property
    def has_gemini_credentials(self) -> bool:
        return not is_placeholder_credential(self.gemini_api_key)


settings = Settings()
