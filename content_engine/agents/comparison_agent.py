"""Comparison page agent and its fixed counterpart product."""

from typing import Any

from content_engine.agents.base_agent import BasePageAgent, PageContext
from content_engine.schemas.pages import ComparisonPage
from content_engine.schemas.product import Product
from content_engine.services.content_blocks import (
    build_comparison_points_block,
    build_comparison_scoreboard_block,
    build_comparison_summaries_block,
)
from content_engine.services.template_engine import TemplateEngine

# Fixed "Product B"; not derived from any input.
COMPARISON_PRODUCT = Product(
    name="RadiancePlus Brightening Serum",
    brand="RadiancePlus",
    description="A brightening serum with a higher vitamin C concentration.",
    concentration="15% Vitamin C",
    ingredients=("Vitamin C", "Vitamin E", "Ferulic Acid"),
    benefits=("Brightening", "Anti-aging", "Antioxidant protection"),
    skin_types=("Normal", "Dry", "Combination"),
    usage_instructions="Apply 3-4 drops morning and evening",
    safety_notes=("May cause slight redness initially",),
    size_options=("30ml",),
    price=899.0,
    currency="INR",
)


class ComparisonPageAgent(BasePageAgent[ComparisonPage]):
    """Compares the run's product (A) against a fixed counterpart (B)."""

    page_type = "comparison"

    def __init__(
        self,
        engine: TemplateEngine | None = None,
        counterpart: Product = COMPARISON_PRODUCT,
    ) -> None:
        super().__init__(engine)
        self.counterpart = counterpart

    def build_blocks(self, context: PageContext) -> dict[str, Any]:
        summaries = build_comparison_summaries_block(context.product, self.counterpart)
        rows = build_comparison_points_block(summaries.summary_a, summaries.summary_b)
        return {
            "comparison_summaries": summaries,
            "comparison_points": rows,
            "comparison_scoreboard": build_comparison_scoreboard_block(rows),
        }
