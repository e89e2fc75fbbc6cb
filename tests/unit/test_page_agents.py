"""Tests for the FAQ, product and comparison page agents."""

import json

import pytest

from content_engine.agents import (
    COMPARISON_PRODUCT,
    ComparisonPageAgent,
    FAQPageAgent,
    PageContext,
    ProductPageAgent,
    build_page_agents,
)
from content_engine.core.exceptions import TemplateValidationError
from content_engine.schemas.pages import ComparisonPage, FAQPage, ProductPage
from content_engine.services.normalizer import normalize
from content_engine.services.question_generator import generate_questions
from content_engine.services.template_engine import TemplateEngine


def _context() -> PageContext:
    product = normalize(
        {
            "Product Name": "GlowBoost Vitamin C Serum",
            "Concentration": "10% Vitamin C",
            "Skin Type": "Oily, Combination",
            "Key Ingredients": "Vitamin C, Hyaluronic Acid",
            "Benefits": "Brightening, Fades dark spots",
            "How to Use": "Apply 2–3 drops in the morning before sunscreen",
            "Side Effects": "Mild tingling for sensitive skin",
            "Price": "₹699",
        }
    )
    return PageContext(product=product, questions=tuple(generate_questions(product)))


def test_build_page_agents_is_a_closed_ordered_set() -> None:
    agents = build_page_agents()

    assert [agent.page_type for agent in agents] == ["faq", "product", "comparison"]
    assert len({id(agent.engine) for agent in agents}) == 1


def test_faq_agent_produces_sections_for_every_category() -> None:
    context = _context()

    page = FAQPageAgent().run(context)

    assert isinstance(page, FAQPage)
    assert page.question_count == len(context.questions)
    assert page.categories == ["informational", "usage", "safety", "purchase", "comparison"]
    assert [section.category for section in page.sections] == page.categories
    first_item = page.sections[0].items[0]
    assert first_item.question == "What is GlowBoost Vitamin C Serum?"


def test_product_agent_produces_hero_and_details() -> None:
    page = ProductPageAgent().run(_context())

    assert isinstance(page, ProductPage)
    assert page.hero.title == "GlowBoost Vitamin C Serum (10% Vitamin C)"
    assert page.hero.key_benefits == ["Brightening", "Fades dark spots"]
    assert page.details.skin_types == ["Oily", "Combination"]
    assert page.pricing.price == 699.0
    assert page.usage.steps == ["Apply 2–3 drops in the morning before sunscreen"]


def test_comparison_agent_compares_against_fixed_counterpart() -> None:
    page = ComparisonPageAgent().run(_context())

    assert isinstance(page, ComparisonPage)
    assert page.products.summary_a.name == "GlowBoost Vitamin C Serum"
    assert page.products.summary_b.name == COMPARISON_PRODUCT.name
    assert page.rows
    assert page.scoreboard.wins_a + page.scoreboard.wins_b + page.scoreboard.ties > 0


def test_comparison_against_itself_fails_distinct_products() -> None:
    context = _context()
    agent = ComparisonPageAgent(TemplateEngine(), counterpart=context.product)

    with pytest.raises(TemplateValidationError) as exc_info:
        agent.run(context)

    assert exc_info.value.rule_names == ["distinct_products"]


def test_pages_serialize_to_plain_json() -> None:
    context = _context()

    for agent in build_page_agents():
        payload = agent.run(context).model_dump(mode="json")
        decoded = json.loads(json.dumps(payload))
        assert decoded["page_type"] == agent.page_type


def test_pages_are_reproducible_byte_for_byte() -> None:
    first = [agent.run(_context()).model_dump_json() for agent in build_page_agents()]
    second = [agent.run(_context()).model_dump_json() for agent in build_page_agents()]

    assert first == second
