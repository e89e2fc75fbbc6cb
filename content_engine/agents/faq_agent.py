"""FAQ page agent."""

from typing import Any

from content_engine.agents.base_agent import BasePageAgent, PageContext
from content_engine.schemas.pages import FAQPage
from content_engine.services.content_blocks import (
    build_faq_items_block,
    build_faq_overview_block,
    build_faq_sections_block,
)


class FAQPageAgent(BasePageAgent[FAQPage]):
    """Answers every generated question and groups answers by category."""

    page_type = "faq"

    def build_blocks(self, context: PageContext) -> dict[str, Any]:
        faq_items = build_faq_items_block(context.product, context.questions)
        overview = build_faq_overview_block(context.product, faq_items)
        return {
            "faq_items": faq_items,
            "faq_overview": overview,
            "faq_sections": build_faq_sections_block(faq_items, overview.categories),
        }
