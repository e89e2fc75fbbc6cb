"""Typed outputs of the content block library."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from content_engine.schemas.question import QuestionCategory

ComparisonWinner = Literal["a", "b", "tie"]
ComparisonValue = float | int | str | list[str] | None


class BlockModel(BaseModel):
    """Base for immutable block outputs."""

    model_config = ConfigDict(frozen=True)


class HeroSummary(BlockModel):
    """Headline facts for the top of the product page."""

    title: str
    tagline: str
    key_benefits: list[str] = Field(default_factory=list)


class IngredientsBlock(BlockModel):
    """Key ingredient listing."""

    key_ingredients: list[str]
    count: int
    concentration: str | None = None


class ProductDetails(BlockModel):
    """Ingredient and suitability details for the product page."""

    ingredients: list[str]
    concentration: str | None = None
    skin_types: list[str]


class BenefitsBlock(BlockModel):
    """All benefits in source order."""

    items: list[str]
    count: int


class UsageBlock(BlockModel):
    """Usage instructions split into ordered steps."""

    instructions: str
    steps: list[str]


class SafetyBlock(BlockModel):
    """Safety notes and suitability facts."""

    notes: list[str]
    suitable_skin_types: list[str]
    patch_test_recommended: bool


class PricingBlock(BlockModel):
    """Price and available sizes."""

    price: float
    currency: str
    size_options: list[str] = Field(default_factory=list)


class FAQItem(BlockModel):
    """A question with its synthesized answer."""

    question: str
    answer: str
    category: QuestionCategory


class FAQSection(BlockModel):
    """FAQ items grouped under one category."""

    category: QuestionCategory
    items: list[FAQItem]


class FAQOverview(BlockModel):
    """Headline facts for the FAQ page."""

    product_name: str
    question_count: int
    categories: list[QuestionCategory]


class ProductSummary(BlockModel):
    """Comparison-ready facts about one product."""

    name: str
    brand: str | None = None
    price: float
    currency: str
    concentration: str | None = None
    concentration_percent: float | None = None
    key_ingredients: list[str]
    benefits: list[str]
    benefit_count: int
    skin_types: list[str]
    size_options: list[str] = Field(default_factory=list)


class ComparisonSummaries(BlockModel):
    """Both sides of a comparison."""

    summary_a: ProductSummary
    summary_b: ProductSummary


class ComparisonRow(BlockModel):
    """One attribute compared side by side."""

    attribute: str
    value_a: ComparisonValue
    value_b: ComparisonValue
    winner: ComparisonWinner | None = None


class ComparisonScoreboard(BlockModel):
    """Winner tallies across comparison rows."""

    wins_a: int
    wins_b: int
    ties: int
    undecided: int
