"""Deterministic, categorized question generation from a Product."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from string import Formatter

from content_engine.config import settings
from content_engine.core.exceptions import InsufficientCoverageError
from content_engine.schemas.product import Product
from content_engine.schemas.question import QUESTION_CATEGORIES, QuestionCategory, UserQuestion
from content_engine.services.formatting import format_price, join_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuestionTemplate:
    """One question pattern; skipped when any interpolated value is empty."""

    topic: str
    text: str
    requires: tuple[str, ...] = ()

    @property
    def placeholders(self) -> tuple[str, ...]:
        return tuple(field for _, field, _, _ in Formatter().parse(self.text) if field)


# Each category keeps at least its default minimum of templates that depend
# only on required Product fields.
QUESTION_TEMPLATES: dict[QuestionCategory, tuple[QuestionTemplate, ...]] = {
    "informational": (
        QuestionTemplate("overview", "What is {name}?"),
        QuestionTemplate("ingredients", "What are the key ingredients in {name}?"),
        QuestionTemplate("benefits", "What are the main benefits of {name}?"),
        QuestionTemplate("skin_types", "Which skin types is {name} suitable for?"),
        QuestionTemplate("primary_ingredient", "What does {primary_ingredient} do in {name}?"),
        QuestionTemplate("concentration", "What is the concentration of {name}?", ("concentration",)),
        QuestionTemplate("brand", "Which brand makes {name}?", ("brand",)),
        QuestionTemplate("ingredient_count", "How many key ingredients does {name} contain?"),
    ),
    "usage": (
        QuestionTemplate("how_to_use", "How do I use {name}?"),
        QuestionTemplate("time_of_day", "When should I apply {name} in my routine?"),
        QuestionTemplate("amount", "How much {name} should I apply each time?"),
        QuestionTemplate("layering", "Can I layer {name} with other skincare products?"),
        QuestionTemplate("sunscreen", "Do I need sunscreen when using {name}?"),
        QuestionTemplate("skin_type_usage", "Can I use {name} if I have {primary_skin_type} skin?"),
        QuestionTemplate("results", "How long before I see {primary_benefit} results from {name}?"),
    ),
    "safety": (
        QuestionTemplate("side_effects", "Are there any side effects of {name}?"),
        QuestionTemplate("sensitive_skin", "Is {name} safe for sensitive skin?"),
        QuestionTemplate("patch_test", "Should I do a patch test before using {name}?"),
        QuestionTemplate("ingredient_allergy", "What should I do if I am allergic to {primary_ingredient}?"),
        QuestionTemplate("pregnancy", "Is {name} safe to use during pregnancy?"),
        QuestionTemplate(
            "concentration_strength",
            "Is the {concentration} in {name} too strong for beginners?",
            ("concentration",),
        ),
    ),
    "purchase": (
        QuestionTemplate("price", "How much does {name} cost?"),
        QuestionTemplate("sizes", "What sizes is {name} available in?", ("size_options",)),
        QuestionTemplate("value", "Is {name} worth the price?"),
        QuestionTemplate("where_to_buy", "Where can I buy {name}?"),
        QuestionTemplate("bottle_life", "How long does one {size} of {name} last?", ("size_options",)),
        QuestionTemplate("currency", "Which currency is {name} priced in?"),
    ),
    "comparison": (
        QuestionTemplate("alternatives", "How does {name} compare to other {primary_ingredient} products?"),
        QuestionTemplate("differentiator", "What makes {name} different from similar products?"),
        QuestionTemplate("brand_range", "How does {name} compare to other {brand} products?", ("brand",)),
        QuestionTemplate("price_comparison", "Is {name} more affordable than comparable products?"),
    ),
}


def question_context(product: Product) -> dict[str, str]:
    """Values available to question templates."""
    return {
        "name": product.name,
        "brand": product.brand,
        "concentration": product.concentration,
        "primary_ingredient": product.ingredients[0],
        "ingredients": join_items(product.ingredients),
        "primary_benefit": product.benefits[0].lower(),
        "primary_skin_type": product.skin_types[0].lower(),
        "skin_types": join_items([skin_type.lower() for skin_type in product.skin_types]),
        "size": product.size_options[0] if product.size_options else "",
        "price": format_price(product.price, product.currency),
    }


def _render_template(
    template: QuestionTemplate,
    product: Product,
    context: Mapping[str, str],
) -> str | None:
    if any(not getattr(product, field) for field in template.requires):
        return None
    if any(not context.get(field) for field in template.placeholders):
        return None
    return template.text.format(**context)


def generate_questions(
    product: Product,
    *,
    minimums: Mapping[str, int] | None = None,
    min_total: int | None = None,
    templates: Mapping[QuestionCategory, Sequence[QuestionTemplate]] | None = None,
) -> list[UserQuestion]:
    """Generate questions grouped by category in a fixed order.

    Raises:
        InsufficientCoverageError: If a category (or the total) falls below its
            configured minimum.
    """
    category_minimums = dict(minimums) if minimums is not None else settings.get_category_minimums()
    required_total = settings.min_total_questions if min_total is None else min_total
    category_templates = QUESTION_TEMPLATES if templates is None else templates

    context = question_context(product)
    questions: list[UserQuestion] = []
    seen_text: set[str] = set()
    counts: dict[str, int] = {}

    for category in QUESTION_CATEGORIES:
        produced = 0
        for template in category_templates.get(category, ()):
            text = _render_template(template, product, context)
            if text is None:
                logger.debug(
                    "Question template skipped",
                    extra={"category": category, "topic": template.topic},
                )
                continue
            key = text.casefold()
            if key in seen_text:
                continue
            seen_text.add(key)
            questions.append(UserQuestion(text=text, category=category, topic=template.topic))
            produced += 1

        counts[category] = produced
        required = category_minimums.get(category, 0)
        if produced < required:
            logger.error(
                "Question coverage below minimum",
                extra={"category": category, "produced": produced, "required": required},
            )
            raise InsufficientCoverageError(category, produced, required)

    if len(questions) < required_total:
        raise InsufficientCoverageError("total", len(questions), required_total)

    logger.info(
        "Questions generated",
        extra={"product": product.name, "total": len(questions), "by_category": counts},
    )
    return questions
