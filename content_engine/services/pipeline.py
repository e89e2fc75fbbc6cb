"""Pipeline driver: normalize, generate questions, build every page."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from content_engine.agents import BasePageAgent, PageContext, build_page_agents
from content_engine.config import settings
from content_engine.core.exceptions import PageAssemblyError
from content_engine.integrations.document_io import DocumentWriter
from content_engine.schemas.pages import PageModel
from content_engine.schemas.product import Product, RawProductInput
from content_engine.schemas.question import UserQuestion
from content_engine.services.normalizer import normalize
from content_engine.services.question_generator import generate_questions
from content_engine.services.template_engine import TemplateEngine

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PageFailure:
    """Why one page type was not produced."""

    page_type: str
    error: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PipelineResult:
    """Documents produced by one run, plus page-scoped failures."""

    product: Product
    questions: list[UserQuestion]
    documents: dict[str, PageModel] = field(default_factory=dict)
    failures: dict[str, PageFailure] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures


class ContentPipeline:
    """Run the content engine once over a single raw product record.

    Normalization and question-generation errors abort the run. Page assembly
    and validation errors are recorded per page type; other pages still run.
    Only successful documents are handed to the writer.
    """

    def __init__(
        self,
        *,
        engine: TemplateEngine | None = None,
        agents: Sequence[BasePageAgent] | None = None,
        writer: DocumentWriter | None = None,
        concurrent: bool | None = None,
    ) -> None:
        self.agents = list(agents) if agents is not None else build_page_agents(engine)
        self.writer = writer
        self.concurrent = settings.concurrent_pages if concurrent is None else concurrent

    async def run(self, raw: RawProductInput) -> PipelineResult:
        product = normalize(raw)
        questions = generate_questions(product)
        context = PageContext(product=product, questions=tuple(questions))
        result = PipelineResult(product=product, questions=questions)

        if self.concurrent:
            outcomes = await asyncio.gather(
                *(asyncio.to_thread(self._run_agent, agent, context) for agent in self.agents)
            )
        else:
            outcomes = [self._run_agent(agent, context) for agent in self.agents]

        for page_type, document, failure in outcomes:
            if failure is not None:
                result.failures[page_type] = failure
            elif document is not None:
                result.documents[page_type] = document

        if self.writer is not None:
            for page_type, document in result.documents.items():
                self.writer.write(page_type, document)

        logger.info(
            "Pipeline run finished",
            extra={
                "product": product.name,
                "questions": len(questions),
                "pages": sorted(result.documents),
                "failed_pages": sorted(result.failures),
            },
        )
        return result

    @staticmethod
    def _run_agent(
        agent: BasePageAgent,
        context: PageContext,
    ) -> tuple[str, PageModel | None, PageFailure | None]:
        try:
            return agent.page_type, agent.run(context), None
        except PageAssemblyError as exc:
            logger.warning(
                "Page generation failed",
                extra={"page_type": agent.page_type, "error": type(exc).__name__, "reason": exc.message},
            )
            failure = PageFailure(
                page_type=agent.page_type,
                error=type(exc).__name__,
                message=exc.message,
                details=exc.details,
            )
            return agent.page_type, None, failure
