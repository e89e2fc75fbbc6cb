"""Tests for categorized question generation."""

from collections import Counter

import pytest

from content_engine.core.exceptions import InsufficientCoverageError
from content_engine.schemas.product import Product
from content_engine.schemas.question import QUESTION_CATEGORIES
from content_engine.services.question_generator import (
    QUESTION_TEMPLATES,
    QuestionTemplate,
    generate_questions,
)


def _minimal_product() -> Product:
    return Product(
        name="GlowBoost Vitamin C Serum",
        ingredients=("Vitamin C", "Hyaluronic Acid"),
        benefits=("Brightening", "Fades dark spots"),
        skin_types=("Oily", "Combination"),
        usage_instructions="Apply 2–3 drops in the morning before sunscreen",
        price=699.0,
    )


def _full_product() -> Product:
    return _minimal_product().model_copy(
        update={
            "brand": "GlowBoost",
            "concentration": "10% Vitamin C",
            "safety_notes": ("Mild tingling for sensitive skin",),
            "size_options": ("30ml",),
        }
    )


def test_full_product_yields_the_default_target_of_31_questions() -> None:
    questions = generate_questions(_full_product())

    assert len(questions) == 31
    assert len(questions) == sum(len(templates) for templates in QUESTION_TEMPLATES.values())


def test_every_category_meets_its_minimum_for_a_minimal_product() -> None:
    questions = generate_questions(_minimal_product())
    counts = Counter(question.category for question in questions)

    assert counts["informational"] >= 6
    assert counts["usage"] >= 5
    assert counts["safety"] >= 4
    assert counts["purchase"] >= 4
    assert counts["comparison"] >= 2
    assert len(questions) >= 15
    assert set(counts) == set(QUESTION_CATEGORIES)


def test_questions_are_grouped_in_fixed_category_order() -> None:
    questions = generate_questions(_full_product())
    categories = [question.category for question in questions]

    first_seen = list(dict.fromkeys(categories))
    assert first_seen == list(QUESTION_CATEGORIES)
    assert categories == sorted(categories, key=QUESTION_CATEGORIES.index)


def test_generation_is_deterministic_and_duplicate_free() -> None:
    first = generate_questions(_full_product())
    second = generate_questions(_full_product())

    assert first == second
    texts = [question.text.casefold() for question in first]
    assert len(texts) == len(set(texts))


def test_templates_with_empty_optional_fields_are_skipped() -> None:
    questions = generate_questions(_minimal_product())
    topics = {question.topic for question in questions}

    assert "brand" not in topics
    assert "sizes" not in topics
    assert "concentration" not in topics
    assert all("{" not in question.text for question in questions)


def test_questions_interpolate_product_fields() -> None:
    questions = generate_questions(_full_product())
    by_topic = {question.topic: question.text for question in questions}

    assert by_topic["ingredients"] == "What are the key ingredients in GlowBoost Vitamin C Serum?"
    assert by_topic["brand"] == "Which brand makes GlowBoost Vitamin C Serum?"
    assert by_topic["skin_type_usage"] == "Can I use GlowBoost Vitamin C Serum if I have oily skin?"


def test_category_shortfall_raises_insufficient_coverage() -> None:
    with pytest.raises(InsufficientCoverageError) as exc_info:
        generate_questions(_minimal_product(), minimums={"purchase": 5})

    assert exc_info.value.category == "purchase"
    assert exc_info.value.produced == 4
    assert exc_info.value.required == 5


def test_total_shortfall_raises_insufficient_coverage() -> None:
    with pytest.raises(InsufficientCoverageError) as exc_info:
        generate_questions(_full_product(), min_total=40)

    assert exc_info.value.category == "total"


def test_duplicate_template_text_is_emitted_once() -> None:
    templates = {
        "informational": (
            QuestionTemplate("overview", "What is {name}?"),
            QuestionTemplate("overview_again", "what is {name}?"),
        ),
    }

    questions = generate_questions(
        _minimal_product(),
        templates=templates,
        minimums={"informational": 1},
        min_total=1,
    )

    assert [question.topic for question in questions] == ["overview"]
