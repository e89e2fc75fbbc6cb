"""Template-driven page assembly and validation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from content_engine.config import settings
from content_engine.core.exceptions import (
    MissingFieldError,
    PageAssemblyError,
    TemplateConfigurationError,
    TemplateValidationError,
    UnknownPageTypeError,
)
from content_engine.schemas.pages import PAGE_MODELS, PageModel
from content_engine.schemas.template import RuleViolation, TemplateDefinition
from content_engine.services.template_rules import check_rule_config, run_rule

logger = logging.getLogger(__name__)

_MISSING = object()


# ========== Definition loading ==========

def _read_definitions(path: Path) -> dict[str, TemplateDefinition]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise TemplateConfigurationError(f"Cannot read template definitions: {exc}", {"path": str(path)}) from exc

    templates = payload.get("templates") if isinstance(payload, dict) else None
    if not isinstance(templates, dict):
        raise TemplateConfigurationError(
            "Template definitions must include a 'templates' mapping",
            {"path": str(path)},
        )

    definitions: dict[str, TemplateDefinition] = {}
    for page_type, body in templates.items():
        if not isinstance(body, dict):
            raise TemplateConfigurationError(f"Template '{page_type}' must be a mapping")
        try:
            definition = TemplateDefinition.model_validate({"page_type": page_type, **body})
        except PydanticValidationError as exc:
            raise TemplateConfigurationError(
                f"Invalid template '{page_type}': {exc.errors()[0].get('msg')}",
                {"page_type": page_type},
            ) from exc
        for rule in definition.rules:
            check_rule_config(rule)
        definitions[str(page_type)] = definition

    logger.info(
        "Template definitions loaded",
        extra={"path": str(path), "page_types": sorted(definitions)},
    )
    return definitions


@lru_cache
def _load_default_definitions() -> dict[str, TemplateDefinition]:
    return _read_definitions(settings.get_templates_path())


def load_template_definitions(path: Path | str | None = None) -> dict[str, TemplateDefinition]:
    """Load template definitions from YAML; the default file is read once."""
    if path is None:
        return dict(_load_default_definitions())
    return _read_definitions(Path(path))


# ========== Assembly ==========

def _resolve_source(block_outputs: Mapping[str, Any], source: str) -> Any:
    block_name, *attributes = source.split(".")
    current = block_outputs.get(block_name, _MISSING)
    for attribute in attributes:
        if isinstance(current, BaseModel):
            current = getattr(current, attribute) if attribute in type(current).model_fields else _MISSING
        elif isinstance(current, Mapping):
            current = current.get(attribute, _MISSING)
        else:
            return _MISSING
        if current is _MISSING:
            return _MISSING
    return current


def assemble(
    page_type: str,
    block_outputs: Mapping[str, Any],
    definition: TemplateDefinition,
) -> PageModel:
    """Map each required field onto block outputs and build the page model.

    Raises:
        MissingFieldError: If a required block is absent or a required field
            has no source that resolves to a value.
        PageAssemblyError: If resolved values do not fit the page model.
    """
    model_cls = PAGE_MODELS.get(page_type)
    if model_cls is None:
        raise UnknownPageTypeError(page_type)

    for block_name in definition.required_blocks:
        if block_name not in block_outputs:
            raise MissingFieldError(page_type, f"blocks.{block_name}")

    fields: dict[str, Any] = {}
    for field in definition.required_fields:
        source = definition.field_sources.get(field)
        if not source:
            raise MissingFieldError(page_type, field)
        value = _resolve_source(block_outputs, source)
        if value is _MISSING or value is None:
            raise MissingFieldError(page_type, field, source)
        fields[field] = value

    try:
        return model_cls.model_validate({"page_type": page_type, **fields})
    except PydanticValidationError as exc:
        first_error = exc.errors()[0]
        field = str((first_error.get("loc") or ("document",))[0])
        if first_error.get("type") == "missing":
            raise MissingFieldError(page_type, field) from exc
        raise PageAssemblyError(
            page_type,
            f"Page '{page_type}' field '{field}' is malformed: {first_error.get('msg')}",
            {"field": field},
        ) from exc


# ========== Validation ==========

def validate(document: PageModel, definition: TemplateDefinition) -> list[RuleViolation]:
    """Run every rule and return all violations (empty when the page is valid)."""
    data = document.model_dump(mode="json")
    violations: list[RuleViolation] = []
    for rule in definition.rules:
        violation = run_rule(data, rule)
        if violation is not None:
            violations.append(violation)
    return violations


class TemplateEngine:
    """Assemble and validate page documents against loaded definitions."""

    def __init__(self, definitions: Mapping[str, TemplateDefinition] | None = None) -> None:
        if definitions is None:
            self.definitions = load_template_definitions()
            return
        for definition in definitions.values():
            for rule in definition.rules:
                check_rule_config(rule)
        self.definitions = dict(definitions)

    def get_definition(self, page_type: str) -> TemplateDefinition:
        definition = self.definitions.get(page_type)
        if definition is None:
            raise UnknownPageTypeError(page_type)
        return definition

    def assemble(self, page_type: str, block_outputs: Mapping[str, Any]) -> PageModel:
        return assemble(page_type, block_outputs, self.get_definition(page_type))

    def validate(self, document: PageModel) -> list[RuleViolation]:
        return validate(document, self.get_definition(document.page_type))

    def build(self, page_type: str, block_outputs: Mapping[str, Any]) -> PageModel:
        """Assemble then validate; a page with any violation is never returned.

        Raises:
            MissingFieldError: From assembly.
            TemplateValidationError: Carrying the complete violation list.
        """
        document = self.assemble(page_type, block_outputs)
        violations = self.validate(document)
        if violations:
            logger.warning(
                "Page failed template validation",
                extra={"page_type": page_type, "violations": violations},
            )
            raise TemplateValidationError(page_type, violations)

        logger.info("Page assembled", extra={"page_type": page_type})
        return document
