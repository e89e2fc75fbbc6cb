"""Pure content blocks: typed facts derived from products and questions.

Blocks never read clocks, random sources, or mutable globals. Configuration
is only consulted for default parameter values.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence

from content_engine.config import HERO_BENEFIT_LIMIT, settings
from content_engine.core.exceptions import UnansweredQuestionError
from content_engine.schemas.blocks import (
    BenefitsBlock,
    ComparisonRow,
    ComparisonScoreboard,
    ComparisonSummaries,
    ComparisonValue,
    ComparisonWinner,
    FAQItem,
    FAQOverview,
    FAQSection,
    HeroSummary,
    IngredientsBlock,
    PricingBlock,
    ProductDetails,
    ProductSummary,
    SafetyBlock,
    UsageBlock,
)
from content_engine.schemas.product import Product
from content_engine.schemas.question import QUESTION_CATEGORIES, QuestionCategory, UserQuestion
from content_engine.services.formatting import format_price, join_items

logger = logging.getLogger(__name__)

AnswerRule = Callable[[Product, UserQuestion], str]

_PERCENT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_STEP_SPLIT = re.compile(r"(?:\.\s+|;\s*|\n+|\bthen\b)", re.IGNORECASE)


# ========== Product page blocks ==========

def summarize_product_for_hero(product: Product, *, benefit_cap: int | None = None) -> HeroSummary:
    """Headline with the first N benefits in source order."""
    cap = settings.hero_benefit_cap if benefit_cap is None else benefit_cap
    key_benefits = list(product.benefits[: max(0, min(cap, HERO_BENEFIT_LIMIT))])

    title = product.name
    if product.concentration:
        title = f"{product.name} ({product.concentration})"

    skin_types = join_items([skin_type.lower() for skin_type in product.skin_types])
    tagline = f"{join_items(key_benefits)} for {skin_types} skin" if key_benefits else f"For {skin_types} skin"

    return HeroSummary(title=title, tagline=tagline, key_benefits=key_benefits)


def build_product_details_block(product: Product) -> ProductDetails:
    return ProductDetails(
        ingredients=list(product.ingredients),
        concentration=product.concentration or None,
        skin_types=list(product.skin_types),
    )


def build_ingredients_block(product: Product) -> IngredientsBlock:
    return IngredientsBlock(
        key_ingredients=list(product.ingredients),
        count=len(product.ingredients),
        concentration=product.concentration or None,
    )


def build_benefits_block(product: Product) -> BenefitsBlock:
    return BenefitsBlock(items=list(product.benefits), count=len(product.benefits))


def build_usage_block(product: Product) -> UsageBlock:
    """Split usage instructions into ordered steps."""
    steps = [
        step.strip().rstrip(".").strip()
        for step in _STEP_SPLIT.split(product.usage_instructions)
    ]
    steps = [step[0].upper() + step[1:] for step in steps if step]
    return UsageBlock(instructions=product.usage_instructions, steps=steps)


def build_safety_block(product: Product) -> SafetyBlock:
    return SafetyBlock(
        notes=list(product.safety_notes),
        suitable_skin_types=list(product.skin_types),
        patch_test_recommended=bool(product.safety_notes),
    )


def build_pricing_block(product: Product) -> PricingBlock:
    return PricingBlock(
        price=product.price,
        currency=product.currency,
        size_options=list(product.size_options),
    )


# ========== FAQ blocks ==========

def _answer_context(product: Product) -> dict[str, str]:
    return {
        "name": product.name,
        "brand": product.brand,
        "description": product.description,
        "concentration": product.concentration or "a standard concentration",
        "ingredients": join_items(product.ingredients),
        "ingredient_count": str(len(product.ingredients)),
        "primary_ingredient": product.ingredients[0],
        "benefits": join_items([benefit.lower() for benefit in product.benefits]),
        "primary_benefit": product.benefits[0].lower(),
        "skin_types": join_items([skin_type.lower() for skin_type in product.skin_types]),
        "usage": "; ".join(product.usage_instructions.splitlines()),
        "safety": "; ".join(product.safety_notes) or "No specific side effects are listed",
        "sizes": join_items(product.size_options, "or") or "a single standard size",
        "size": product.size_options[0] if product.size_options else "bottle",
        "price": format_price(product.price, product.currency),
        "currency": product.currency,
    }


_TOPIC_ANSWERS: dict[QuestionCategory, dict[str, str]] = {
    "informational": {
        "overview": "{name} is a product with {ingredients} that offers {benefits}.",
        "ingredients": "The key ingredients in {name} are {ingredients}.",
        "benefits": "{name} offers {benefits}.",
        "skin_types": "{name} is suited to {skin_types} skin.",
        "primary_ingredient": "{primary_ingredient} is a key ingredient in {name}, which offers {benefits}.",
        "concentration": "{name} contains {concentration}.",
        "brand": "{name} is made by {brand}.",
        "ingredient_count": "{name} contains {ingredient_count} key ingredients: {ingredients}.",
    },
    "usage": {
        "how_to_use": "{usage}.",
        "time_of_day": "Follow the directions for {name}: {usage}.",
        "amount": "Use the amount given in the directions: {usage}.",
        "layering": "{name} can be part of a routine; follow its directions: {usage}.",
        "sunscreen": "Follow the directions for {name}: {usage}.",
        "skin_type_usage": "{name} is suited to {skin_types} skin.",
        "results": "{name} is intended for {primary_benefit} with regular use as directed: {usage}.",
    },
    "safety": {
        "side_effects": "{safety}.",
        "sensitive_skin": "Safety notes for {name}: {safety}.",
        "patch_test": "A patch test is recommended before first use. Safety notes: {safety}.",
        "ingredient_allergy": "{name} contains {primary_ingredient}; avoid it if you are allergic to {primary_ingredient}.",
        "pregnancy": "Check with a healthcare professional before use. Safety notes for {name}: {safety}.",
        "concentration_strength": "{name} contains {concentration}. Safety notes: {safety}.",
    },
    "purchase": {
        "price": "{name} costs {price}.",
        "sizes": "{name} is available in {sizes}.",
        "value": "{name} costs {price} and offers {benefits}.",
        "where_to_buy": "{name} is sold in {sizes} at {price}.",
        "bottle_life": "One {size} of {name} lasts as long as regular use as directed allows: {usage}.",
        "currency": "{name} is priced in {currency}.",
    },
    "comparison": {
        "alternatives": "{name} combines {ingredients} for {benefits} at {price}.",
        "differentiator": "{name} combines {ingredients} and is suited to {skin_types} skin.",
        "brand_range": "{name} is part of the {brand} range and offers {benefits}.",
        "price_comparison": "{name} costs {price}; see the comparison page for a side-by-side view.",
    },
}

_CATEGORY_FALLBACK_ANSWERS: dict[QuestionCategory, str] = {
    "informational": "{name} contains {ingredients} and offers {benefits}.",
    "usage": "{usage}.",
    "safety": "{safety}.",
    "purchase": "{name} costs {price} and is available in {sizes}.",
    "comparison": "{name} combines {ingredients} at {price}.",
}


def _tidy_sentence(text: str) -> str:
    text = re.sub(r"\.{2,}", ".", text.strip())
    return text[0].upper() + text[1:] if text else text


def _category_rule(category: QuestionCategory) -> AnswerRule:
    def rule(product: Product, question: UserQuestion) -> str:
        template = _TOPIC_ANSWERS[category].get(question.topic, _CATEGORY_FALLBACK_ANSWERS[category])
        return _tidy_sentence(template.format(**_answer_context(product)))

    return rule


ANSWER_RULES: dict[str, AnswerRule] = {
    category: _category_rule(category) for category in QUESTION_CATEGORIES
}


def answer_question(
    product: Product,
    question: UserQuestion,
    *,
    answer_rules: Mapping[str, AnswerRule] | None = None,
) -> FAQItem:
    """Answer one question from product fields.

    Raises:
        UnansweredQuestionError: If no rule exists for the question's category.
    """
    rules = ANSWER_RULES if answer_rules is None else answer_rules
    rule = rules.get(question.category)
    if rule is None:
        raise UnansweredQuestionError(question.text, question.category)
    return FAQItem(question=question.text, answer=rule(product, question), category=question.category)


def build_faq_items_block(
    product: Product,
    questions: Sequence[UserQuestion],
    *,
    answer_rules: Mapping[str, AnswerRule] | None = None,
) -> list[FAQItem]:
    """One FAQ item per question; unanswerable questions are dropped."""
    items: list[FAQItem] = []
    for question in questions:
        try:
            items.append(answer_question(product, question, answer_rules=answer_rules))
        except UnansweredQuestionError as exc:
            logger.warning("Dropping unanswered question", extra=exc.details)
    return items


def build_faq_sections_block(
    items: Sequence[FAQItem],
    categories: Sequence[QuestionCategory] = QUESTION_CATEGORIES,
) -> list[FAQSection]:
    """Group items by category in fixed category order, skipping empty groups."""
    sections: list[FAQSection] = []
    for category in categories:
        grouped = [item for item in items if item.category == category]
        if grouped:
            sections.append(FAQSection(category=category, items=grouped))
    return sections


def build_faq_overview_block(product: Product, items: Sequence[FAQItem]) -> FAQOverview:
    """Count and categorize the answered items, not the generated questions."""
    present = {item.category for item in items}
    return FAQOverview(
        product_name=product.name,
        question_count=len(items),
        categories=[category for category in QUESTION_CATEGORIES if category in present],
    )


# ========== Comparison blocks ==========

def _concentration_percent(concentration: str) -> float | None:
    match = _PERCENT_PATTERN.search(concentration)
    return float(match.group(1)) if match else None


def summarize_product_for_comparison(product: Product) -> ProductSummary:
    return ProductSummary(
        name=product.name,
        brand=product.brand or None,
        price=product.price,
        currency=product.currency,
        concentration=product.concentration or None,
        concentration_percent=_concentration_percent(product.concentration),
        key_ingredients=list(product.ingredients),
        benefits=list(product.benefits),
        benefit_count=len(product.benefits),
        skin_types=list(product.skin_types),
        size_options=list(product.size_options),
    )


def build_comparison_summaries_block(product_a: Product, product_b: Product) -> ComparisonSummaries:
    return ComparisonSummaries(
        summary_a=summarize_product_for_comparison(product_a),
        summary_b=summarize_product_for_comparison(product_b),
    )


def _ordered_winner(
    value_a: float | None,
    value_b: float | None,
    *,
    higher_is_better: bool,
) -> ComparisonWinner | None:
    if value_a is None or value_b is None:
        return None
    if value_a == value_b:
        return "tie"
    a_better = value_a > value_b if higher_is_better else value_a < value_b
    return "a" if a_better else "b"


def _row(
    attribute: str,
    value_a: ComparisonValue,
    value_b: ComparisonValue,
    winner: ComparisonWinner | None = None,
) -> ComparisonRow:
    return ComparisonRow(attribute=attribute, value_a=value_a, value_b=value_b, winner=winner)


def build_comparison_points_block(
    summary_a: ProductSummary,
    summary_b: ProductSummary,
) -> list[ComparisonRow]:
    """Compare two summaries field by field in a fixed row order.

    Price is only ranked when both products share a currency; concentration
    only when both percentages parse. Unordered attributes carry no winner.
    """
    same_currency = summary_a.currency == summary_b.currency
    return [
        _row(
            "price",
            format_price(summary_a.price, summary_a.currency),
            format_price(summary_b.price, summary_b.currency),
            _ordered_winner(summary_a.price, summary_b.price, higher_is_better=False)
            if same_currency
            else None,
        ),
        _row(
            "concentration",
            summary_a.concentration,
            summary_b.concentration,
            _ordered_winner(
                summary_a.concentration_percent,
                summary_b.concentration_percent,
                higher_is_better=True,
            ),
        ),
        _row("key_ingredients", summary_a.key_ingredients, summary_b.key_ingredients),
        _row(
            "benefit_count",
            summary_a.benefit_count,
            summary_b.benefit_count,
            _ordered_winner(summary_a.benefit_count, summary_b.benefit_count, higher_is_better=True),
        ),
        _row("skin_types", summary_a.skin_types, summary_b.skin_types),
        _row("size_options", summary_a.size_options, summary_b.size_options),
    ]


def build_comparison_scoreboard_block(rows: Sequence[ComparisonRow]) -> ComparisonScoreboard:
    winners = [row.winner for row in rows]
    return ComparisonScoreboard(
        wins_a=winners.count("a"),
        wins_b=winners.count("b"),
        ties=winners.count("tie"),
        undecided=winners.count(None),
    )
