"""Final page document schemas."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from content_engine.schemas.blocks import (
    BenefitsBlock,
    ComparisonRow,
    ComparisonScoreboard,
    ComparisonSummaries,
    FAQSection,
    HeroSummary,
    PricingBlock,
    ProductDetails,
    SafetyBlock,
    UsageBlock,
)
from content_engine.schemas.question import QuestionCategory

PageType = Literal["faq", "product", "comparison"]
PAGE_TYPES: tuple[PageType, ...] = ("faq", "product", "comparison")


class PageModel(BaseModel):
    """Base for immutable, JSON-serializable page documents."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    page_type: str


class FAQPage(PageModel):
    """FAQ page grouped by question category."""

    page_type: Literal["faq"] = "faq"
    product_name: str
    question_count: int
    categories: list[QuestionCategory]
    sections: list[FAQSection]


class ProductPage(PageModel):
    """Product description page."""

    page_type: Literal["product"] = "product"
    hero: HeroSummary
    details: ProductDetails
    benefits: BenefitsBlock
    usage: UsageBlock
    safety: SafetyBlock
    pricing: PricingBlock


class ComparisonPage(PageModel):
    """Side-by-side comparison page."""

    page_type: Literal["comparison"] = "comparison"
    products: ComparisonSummaries
    rows: list[ComparisonRow]
    scoreboard: ComparisonScoreboard


PageDocument = Annotated[
    FAQPage | ProductPage | ComparisonPage,
    Field(discriminator="page_type"),
]

PAGE_MODELS: dict[str, type[PageModel]] = {
    "faq": FAQPage,
    "product": ProductPage,
    "comparison": ComparisonPage,
}
