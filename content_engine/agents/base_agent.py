"""Base class for page agents."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, cast

from content_engine.schemas.pages import PageModel
from content_engine.schemas.product import Product
from content_engine.schemas.question import UserQuestion
from content_engine.services.template_engine import TemplateEngine

logger = logging.getLogger(__name__)

PageT = TypeVar("PageT", bound=PageModel)


@dataclass(frozen=True, slots=True)
class PageContext:
    """Shared, immutable inputs for every page agent in a run."""

    product: Product
    questions: tuple[UserQuestion, ...]


class BasePageAgent(ABC, Generic[PageT]):
    """Abstract base class for page agents.

    Each agent should:
    1. Define page_type
    2. Implement build_blocks, calling blocks in dependency order
    """

    page_type: ClassVar[str]

    def __init__(self, engine: TemplateEngine | None = None) -> None:
        self.engine = engine or TemplateEngine()

    def run(self, context: PageContext) -> PageT:
        """Build this agent's blocks and hand them to the template engine.

        Raises:
            PageAssemblyError: If assembly or validation fails for this page.
        """
        agent_name = self.__class__.__name__
        logger.info(
            "Page agent run started",
            extra={"agent": agent_name, "page_type": self.page_type, "product": context.product.name},
        )

        t0 = time.perf_counter()
        blocks = self.build_blocks(context)
        document = self.engine.build(self.page_type, blocks)
        elapsed = time.perf_counter() - t0

        logger.info(
            "Page agent run completed",
            extra={
                "agent": agent_name,
                "page_type": self.page_type,
                "blocks": sorted(blocks),
                "duration_ms": round(elapsed * 1000, 2),
            },
        )
        return cast(PageT, document)

    @abstractmethod
    def build_blocks(self, context: PageContext) -> dict[str, Any]:
        """Compute the block outputs this page's template requires."""
        pass
