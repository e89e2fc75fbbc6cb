"""Page agents: a closed set, one per page type."""

from content_engine.agents.base_agent import BasePageAgent, PageContext
from content_engine.agents.comparison_agent import COMPARISON_PRODUCT, ComparisonPageAgent
from content_engine.agents.faq_agent import FAQPageAgent
from content_engine.agents.product_page_agent import ProductPageAgent
from content_engine.services.template_engine import TemplateEngine


def build_page_agents(engine: TemplateEngine | None = None) -> list[BasePageAgent]:
    """Instantiate every page agent in output order, sharing one engine."""
    shared_engine = engine or TemplateEngine()
    return [
        FAQPageAgent(shared_engine),
        ProductPageAgent(shared_engine),
        ComparisonPageAgent(shared_engine),
    ]


__all__ = [
    "BasePageAgent",
    "COMPARISON_PRODUCT",
    "ComparisonPageAgent",
    "FAQPageAgent",
    "PageContext",
    "ProductPageAgent",
    "build_page_agents",
]
