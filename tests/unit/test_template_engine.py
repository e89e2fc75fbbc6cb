"""Tests for template loading, page assembly and rule validation."""

from pathlib import Path

import pytest

from content_engine.agents import FAQPageAgent, PageContext
from content_engine.core.exceptions import (
    MissingFieldError,
    PageAssemblyError,
    TemplateConfigurationError,
    TemplateValidationError,
    UnknownPageTypeError,
)
from content_engine.schemas.pages import FAQPage
from content_engine.schemas.product import Product
from content_engine.schemas.template import TemplateDefinition, TemplateRule
from content_engine.services.question_generator import generate_questions
from content_engine.services.template_engine import TemplateEngine, load_template_definitions


def _product() -> Product:
    return Product(
        name="GlowBoost Vitamin C Serum",
        concentration="10% Vitamin C",
        ingredients=("Vitamin C", "Hyaluronic Acid"),
        benefits=("Brightening", "Fades dark spots"),
        skin_types=("Oily", "Combination"),
        usage_instructions="Apply 2–3 drops in the morning before sunscreen",
        safety_notes=("Mild tingling for sensitive skin",),
        price=699.0,
    )


def _faq_blocks(question_limit: int | None = None) -> dict:
    product = _product()
    questions = generate_questions(product)[:question_limit]
    return FAQPageAgent(TemplateEngine()).build_blocks(
        PageContext(product=product, questions=tuple(questions))
    )


def _write_templates(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "templates.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_default_definitions_cover_every_page_type() -> None:
    definitions = load_template_definitions()

    assert set(definitions) == {"faq", "product", "comparison"}
    faq = definitions["faq"]
    assert faq.required_fields == ("product_name", "question_count", "categories", "sections")
    assert TemplateRule(name="min_questions", params={"minimum": 15}) in faq.rules


def test_assemble_builds_faq_page_from_block_outputs() -> None:
    engine = TemplateEngine()

    document = engine.assemble("faq", _faq_blocks())

    assert isinstance(document, FAQPage)
    assert document.product_name == "GlowBoost Vitamin C Serum"
    assert document.question_count == sum(len(section.items) for section in document.sections)
    assert engine.validate(document) == []


def test_faq_with_ten_questions_fails_min_questions() -> None:
    engine = TemplateEngine()
    blocks = _faq_blocks(question_limit=10)

    violations = engine.validate(engine.assemble("faq", blocks))

    assert [violation.rule for violation in violations] == ["min_questions"]
    assert violations[0].details == {"count": 10, "minimum": 15}

    with pytest.raises(TemplateValidationError) as exc_info:
        engine.build("faq", blocks)

    assert exc_info.value.page_type == "faq"
    assert exc_info.value.rule_names == ["min_questions"]


def test_validation_reports_every_violated_rule() -> None:
    definitions = load_template_definitions()
    strict_faq = definitions["faq"].model_copy(
        update={
            "rules": (
                TemplateRule(name="min_questions", params={"minimum": 100}),
                TemplateRule(name="max_items", params={"field": "sections", "maximum": 1}),
                TemplateRule(name="unique_questions"),
            )
        }
    )
    engine = TemplateEngine({**definitions, "faq": strict_faq})

    with pytest.raises(TemplateValidationError) as exc_info:
        engine.build("faq", _faq_blocks())

    assert exc_info.value.rule_names == ["min_questions", "max_items"]


def test_category_coverage_flags_categories_without_items() -> None:
    engine = TemplateEngine()
    blocks = _faq_blocks()
    blocks["faq_sections"] = [section for section in blocks["faq_sections"] if section.category != "safety"]

    violations = engine.validate(engine.assemble("faq", blocks))

    coverage = [violation for violation in violations if violation.rule == "category_coverage"]
    assert coverage[0].details == {"missing": ["safety"]}


def test_missing_required_block_is_a_hard_error() -> None:
    blocks = _faq_blocks()
    del blocks["faq_sections"]

    with pytest.raises(MissingFieldError) as exc_info:
        TemplateEngine().assemble("faq", blocks)

    assert exc_info.value.field == "blocks.faq_sections"


def test_required_field_without_source_is_never_defaulted() -> None:
    definition = TemplateDefinition(
        page_type="faq",
        required_fields=("product_name", "question_count", "categories", "sections"),
        field_sources={
            "question_count": "faq_overview.question_count",
            "categories": "faq_overview.categories",
            "sections": "faq_sections",
        },
    )

    with pytest.raises(MissingFieldError) as exc_info:
        TemplateEngine({"faq": definition}).assemble("faq", _faq_blocks())

    assert exc_info.value.field == "product_name"
    assert isinstance(exc_info.value, PageAssemblyError)


def test_unresolvable_source_path_names_field_and_source() -> None:
    definition = TemplateDefinition(
        page_type="faq",
        required_fields=("product_name",),
        field_sources={"product_name": "faq_overview.title"},
    )

    with pytest.raises(MissingFieldError) as exc_info:
        TemplateEngine({"faq": definition}).assemble("faq", _faq_blocks())

    assert exc_info.value.field == "product_name"
    assert exc_info.value.source == "faq_overview.title"


def test_unknown_page_type_is_rejected() -> None:
    with pytest.raises(UnknownPageTypeError):
        TemplateEngine().assemble("landing", {})


def test_unknown_rule_in_yaml_is_a_configuration_error(tmp_path: Path) -> None:
    path = _write_templates(
        tmp_path,
        """
templates:
  faq:
    required_fields: [sections]
    field_sources: {sections: faq_sections}
    rules:
      - name: word_count
""",
    )

    with pytest.raises(TemplateConfigurationError, match="Unknown template rule"):
        load_template_definitions(path)


def test_rule_missing_params_is_a_configuration_error(tmp_path: Path) -> None:
    path = _write_templates(
        tmp_path,
        """
templates:
  comparison:
    required_fields: [rows]
    rules:
      - name: min_items
        params: {field: rows}
""",
    )

    with pytest.raises(TemplateConfigurationError) as exc_info:
        load_template_definitions(path)

    assert exc_info.value.details["missing"] == ["minimum"]


@pytest.mark.parametrize(
    ("params", "invalid"),
    [
        ("{field: rows, minimum: abc}", ["minimum"]),
        ("{field: rows, minimum: -1}", ["minimum"]),
        ("{field: 3, minimum: true}", ["field", "minimum"]),
    ],
)
def test_rule_params_of_wrong_type_are_a_configuration_error(
    tmp_path: Path,
    params: str,
    invalid: list[str],
) -> None:
    path = _write_templates(
        tmp_path,
        f"""
templates:
  comparison:
    required_fields: [rows]
    rules:
      - name: min_items
        params: {params}
""",
    )

    with pytest.raises(TemplateConfigurationError) as exc_info:
        load_template_definitions(path)

    assert sorted(exc_info.value.details["invalid"]) == invalid


def test_engine_rejects_mistyped_rules_in_code_definitions() -> None:
    definitions = load_template_definitions()
    broken = definitions["faq"].model_copy(
        update={"rules": (TemplateRule(name="min_questions", params={"minimum": "abc"}),)}
    )

    with pytest.raises(TemplateConfigurationError):
        TemplateEngine({**definitions, "faq": broken})


def test_yaml_without_templates_mapping_is_rejected(tmp_path: Path) -> None:
    path = _write_templates(tmp_path, "pages: []\n")

    with pytest.raises(TemplateConfigurationError):
        load_template_definitions(path)


def test_unreadable_template_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(TemplateConfigurationError):
        load_template_definitions(tmp_path / "missing.yaml")
