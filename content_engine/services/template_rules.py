"""Named structural checks referenced by template definitions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from content_engine.core.exceptions import TemplateConfigurationError
from content_engine.schemas.template import RuleViolation, TemplateRule

RuleCheck = Callable[[dict[str, Any], Mapping[str, Any]], RuleViolation | None]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class RuleSpec:
    """A registered check and the params it needs, by expected kind."""

    check: RuleCheck
    required_params: tuple[tuple[str, str], ...] = ()


def _param_error(kind: str, value: Any) -> str | None:
    if kind == "path":
        if not isinstance(value, str) or not value.strip():
            return "must be a dotted field path"
    elif kind == "count":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return "must be a non-negative integer"
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def resolve_path(document: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path through nested dicts; missing segments yield a sentinel."""
    current: Any = document
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return _MISSING
        current = current[segment]
    return current


def _faq_items(document: dict[str, Any]) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for section in _as_list(document.get("sections")):
        items.extend(item for item in _as_list(_as_dict(section).get("items")) if isinstance(item, dict))
    return items


def _check_min_questions(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    minimum = int(params["minimum"])
    count = len(_faq_items(document))
    if count >= minimum:
        return None
    return RuleViolation(
        rule="min_questions",
        message=f"FAQ has {count} questions, at least {minimum} required",
        details={"count": count, "minimum": minimum},
    )


def _check_category_coverage(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    covered = {
        _as_dict(section).get("category")
        for section in _as_list(document.get("sections"))
        if _as_list(_as_dict(section).get("items"))
    }
    missing = [category for category in _as_list(document.get("categories")) if category not in covered]
    if not missing:
        return None
    return RuleViolation(
        rule="category_coverage",
        message=f"No FAQ items for categories: {', '.join(missing)}",
        details={"missing": missing},
    )


def _check_unique_questions(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in _faq_items(document):
        question = str(item.get("question") or "").strip()
        key = question.casefold()
        if key in seen:
            duplicates.append(question)
        seen.add(key)
    if not duplicates:
        return None
    return RuleViolation(
        rule="unique_questions",
        message="FAQ contains duplicate questions",
        details={"duplicates": duplicates},
    )


def _check_non_empty(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    field = str(params["field"])
    value = resolve_path(document, field)
    if value is not _MISSING and value not in (None, "", [], {}):
        return None
    return RuleViolation(
        rule="non_empty",
        message=f"Field '{field}' must not be empty",
        details={"field": field},
    )


def _check_min_items(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    field = str(params["field"])
    minimum = int(params["minimum"])
    count = len(_as_list(resolve_path(document, field)))
    if count >= minimum:
        return None
    return RuleViolation(
        rule="min_items",
        message=f"Field '{field}' has {count} items, at least {minimum} required",
        details={"field": field, "count": count, "minimum": minimum},
    )


def _check_max_items(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    field = str(params["field"])
    maximum = int(params["maximum"])
    count = len(_as_list(resolve_path(document, field)))
    if count <= maximum:
        return None
    return RuleViolation(
        rule="max_items",
        message=f"Field '{field}' has {count} items, at most {maximum} allowed",
        details={"field": field, "count": count, "maximum": maximum},
    )


def _check_distinct_products(document: dict[str, Any], params: Mapping[str, Any]) -> RuleViolation | None:
    products = _as_dict(document.get("products"))
    name_a = str(_as_dict(products.get("summary_a")).get("name") or "").strip()
    name_b = str(_as_dict(products.get("summary_b")).get("name") or "").strip()
    if name_a and name_b and name_a.casefold() != name_b.casefold():
        return None
    return RuleViolation(
        rule="distinct_products",
        message="Comparison requires two distinct named products",
        details={"name_a": name_a, "name_b": name_b},
    )


RULES: dict[str, RuleSpec] = {
    "min_questions": RuleSpec(_check_min_questions, (("minimum", "count"),)),
    "category_coverage": RuleSpec(_check_category_coverage),
    "unique_questions": RuleSpec(_check_unique_questions),
    "non_empty": RuleSpec(_check_non_empty, (("field", "path"),)),
    "min_items": RuleSpec(_check_min_items, (("field", "path"), ("minimum", "count"))),
    "max_items": RuleSpec(_check_max_items, (("field", "path"), ("maximum", "count"))),
    "distinct_products": RuleSpec(_check_distinct_products),
}


def check_rule_config(rule: TemplateRule) -> None:
    """Reject unknown rules and rules with missing or mistyped params."""
    registered = RULES.get(rule.name)
    if registered is None:
        raise TemplateConfigurationError(f"Unknown template rule: {rule.name}", {"rule": rule.name})
    missing = [param for param, _ in registered.required_params if param not in rule.params]
    if missing:
        raise TemplateConfigurationError(
            f"Rule '{rule.name}' is missing params: {', '.join(missing)}",
            {"rule": rule.name, "missing": missing},
        )
    invalid = {
        param: error
        for param, kind in registered.required_params
        if (error := _param_error(kind, rule.params[param])) is not None
    }
    if invalid:
        raise TemplateConfigurationError(
            f"Rule '{rule.name}' has invalid params: {', '.join(invalid)}",
            {"rule": rule.name, "invalid": invalid},
        )


def run_rule(document: dict[str, Any], rule: TemplateRule) -> RuleViolation | None:
    check_rule_config(rule)
    return RULES[rule.name].check(document, rule.params)
