"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATES_PATH = Path(__file__).resolve().parent / "templates" / "page_templates.yaml"
HERO_BENEFIT_LIMIT = 5


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Application
    app_name: str = "ContentSynthesisEngine"
    app_version: str = "0.1.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Question coverage (enforced as post-conditions by the generator)
    min_informational_questions: int = 6
    min_usage_questions: int = 5
    min_safety_questions: int = 4
    min_purchase_questions: int = 4
    min_comparison_questions: int = 2
    min_total_questions: int = 15

    # Content blocks
    hero_benefit_cap: int = 3
    default_currency: str = "INR"

    # Templates / output
    templates_path: str | None = None
    output_dir: str = "output"
    concurrent_pages: bool = True

    def get_category_minimums(self) -> dict[str, int]:
        """Return the per-category question minimums in category order."""
        return {
            "informational": self.min_informational_questions,
            "usage": self.min_usage_questions,
            "safety": self.min_safety_questions,
            "purchase": self.min_purchase_questions,
            "comparison": self.min_comparison_questions,
        }

    def get_templates_path(self) -> Path:
        """Resolve the template definition file, falling back to the packaged one."""
        if self.templates_path:
            return Path(self.templates_path)
        return DEFAULT_TEMPLATES_PATH

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("default_currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("hero_benefit_cap")
    @classmethod
    def _bound_hero_benefit_cap(cls, value: int) -> int:
        if value > HERO_BENEFIT_LIMIT:
            raise ValueError(f"must be at most {HERO_BENEFIT_LIMIT}")
        return value

    @field_validator(
        "min_informational_questions",
        "min_usage_questions",
        "min_safety_questions",
        "min_purchase_questions",
        "min_comparison_questions",
        "min_total_questions",
        "hero_benefit_cap",
    )
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be zero or greater")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()

    return settings


settings = get_settings()
