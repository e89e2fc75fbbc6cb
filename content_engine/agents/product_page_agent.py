"""Product description page agent."""

from typing import Any

from content_engine.agents.base_agent import BasePageAgent, PageContext
from content_engine.schemas.pages import ProductPage
from content_engine.services.content_blocks import (
    build_benefits_block,
    build_pricing_block,
    build_product_details_block,
    build_safety_block,
    build_usage_block,
    summarize_product_for_hero,
)


class ProductPageAgent(BasePageAgent[ProductPage]):
    page_type = "product"

    def build_blocks(self, context: PageContext) -> dict[str, Any]:
        product = context.product
        return {
            "hero": summarize_product_for_hero(product),
            "details": build_product_details_block(product),
            "benefits": build_benefits_block(product),
            "usage": build_usage_block(product),
            "safety": build_safety_block(product),
            "pricing": build_pricing_block(product),
        }
