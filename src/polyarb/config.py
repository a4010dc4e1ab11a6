"""Configuration via pydantic-settings."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchPolicy(str, Enum):
    """How the pipeline picks a counterpart event."""
    FIRST = "first"  # first equivalent candidate wins
    BEST = "best"    # score all candidates, skip ambiguous ones


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """Global settings."""

    model_config = SettingsConfigDict(
        env_prefix="POLYARB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── The Odds API ────────────────────────────────────────────────────────
    odds_api_key: str = Field(default="", description="The Odds API key")
    odds_api_base_url: str = Field(default="https://api.the-odds-api.com/v4")
    odds_api_requests_per_second: float = Field(default=1.0)
    odds_api_regions: str = Field(default="us")

    # ── Polymarket ──────────────────────────────────────────────────────────
    polymarket_base_url: str = Field(default="https://gamma-api.polymarket.com")
    polymarket_requests_per_second: float = Field(default=10.0)
    polymarket_page_size: int = Field(default=100, ge=1, le=500)

    # ── Matching ────────────────────────────────────────────────────────────
    default_league: str = Field(default="nba")
    alias_file: Optional[str] = Field(default=None, description="YAML file with league alias overrides")
    match_policy: MatchPolicy = Field(default=MatchPolicy.FIRST)
    match_tie_tolerance: float = Field(default=0.01, ge=0)

    # ── Hedging ─────────────────────────────────────────────────────────────
    total_stake: float = Field(default=100.0, gt=0, description="Stake spread over both legs")

    # ── Output ──────────────────────────────────────────────────────────────
    output_dir: str = Field(default="outputs/final_arb")

    # ── Logging ─────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE)

    @field_validator("default_league")
    @classmethod
    def _lower_league(cls, v: str) -> str:
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    # ── Helpers ─────────────────────────────────────────────────────────────

    @property
    def odds_api_configured(self) -> bool:
        return bool(self.odds_api_key)

    @property
    def alias_path(self) -> Optional[Path]:
        return Path(self.alias_file) if self.alias_file else None

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)


def get_settings(**overrides) -> Settings:  # type: ignore
    """Factory with optional overrides."""
    return Settings(**overrides)
