"""Declarative template definition schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TemplateRule(BaseModel):
    """A named structural check with its parameters."""

    model_config = ConfigDict(frozen=True)

    name: str
    params: dict[str, Any] = Field(default_factory=dict)


class TemplateDefinition(BaseModel):
    """Required shape and validation rules for one page type."""

    model_config = ConfigDict(frozen=True)

    page_type: str
    required_fields: tuple[str, ...]
    field_sources: dict[str, str] = Field(default_factory=dict)
    required_blocks: tuple[str, ...] = ()
    rules: tuple[TemplateRule, ...] = ()

    @field_validator("required_fields", "required_blocks")
    @classmethod
    def _unique_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("names must be unique")
        return value


class RuleViolation(BaseModel):
    """A failed template rule."""

    model_config = ConfigDict(frozen=True)

    rule: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
