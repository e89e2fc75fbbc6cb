"""Tests for the pipeline driver and its per-page error scoping."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from content_engine.agents import BasePageAgent, PageContext
from content_engine.core.exceptions import InsufficientCoverageError, ValidationError
from content_engine.integrations.document_io import InMemoryDocumentWriter, JsonDocumentWriter
from content_engine.schemas.pages import ProductPage
from content_engine.schemas.template import TemplateRule
from content_engine.services import pipeline as pipeline_module
from content_engine.services.pipeline import ContentPipeline
from content_engine.services.template_engine import TemplateEngine, load_template_definitions


def _raw_record() -> dict:
    return {
        "Product Name": "GlowBoost Vitamin C Serum",
        "Concentration": "10% Vitamin C",
        "Skin Type": "Oily, Combination",
        "Key Ingredients": "Vitamin C, Hyaluronic Acid",
        "Benefits": "Brightening, Fades dark spots",
        "How to Use": "Apply 2–3 drops in the morning before sunscreen",
        "Side Effects": "Mild tingling for sensitive skin",
        "Price": "₹699",
    }


class _RecordingAgent(BasePageAgent[ProductPage]):
    page_type = "product"

    def __init__(self) -> None:
        super().__init__(TemplateEngine(definitions={}))
        self.calls = 0

    def build_blocks(self, context: PageContext) -> dict[str, Any]:
        self.calls += 1
        return {}


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [True, False])
async def test_run_produces_all_three_documents(concurrent: bool) -> None:
    writer = InMemoryDocumentWriter()

    result = await ContentPipeline(writer=writer, concurrent=concurrent).run(_raw_record())

    assert result.succeeded is True
    assert list(result.documents) == ["faq", "product", "comparison"]
    assert set(writer.documents) == {"faq", "product", "comparison"}
    assert result.product.name == "GlowBoost Vitamin C Serum"
    assert len(result.questions) >= 15


@pytest.mark.asyncio
async def test_page_failure_is_scoped_and_not_written() -> None:
    definitions = load_template_definitions()
    broken = definitions["comparison"].model_copy(
        update={"rules": (TemplateRule(name="min_items", params={"field": "rows", "minimum": 99}),)}
    )
    engine = TemplateEngine({**definitions, "comparison": broken})
    writer = InMemoryDocumentWriter()

    result = await ContentPipeline(engine=engine, writer=writer).run(_raw_record())

    assert result.succeeded is False
    assert set(result.documents) == {"faq", "product"}
    assert set(writer.documents) == {"faq", "product"}
    failure = result.failures["comparison"]
    assert failure.error == "TemplateValidationError"
    assert failure.details["rules"] == ["min_items"]


@pytest.mark.asyncio
async def test_missing_price_aborts_before_any_page_runs() -> None:
    raw = _raw_record()
    del raw["Price"]
    agent = _RecordingAgent()
    writer = InMemoryDocumentWriter()

    with pytest.raises(ValidationError) as exc_info:
        await ContentPipeline(agents=[agent], writer=writer).run(raw)

    assert exc_info.value.field == "price"
    assert agent.calls == 0
    assert writer.documents == {}


@pytest.mark.asyncio
async def test_question_coverage_error_aborts_the_run(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(pipeline_module.settings, "min_purchase_questions", 50)
    agent = _RecordingAgent()

    with pytest.raises(InsufficientCoverageError) as exc_info:
        await ContentPipeline(agents=[agent]).run(_raw_record())

    assert exc_info.value.category == "purchase"
    assert agent.calls == 0


@pytest.mark.asyncio
async def test_json_writer_persists_successful_pages(tmp_path: Path) -> None:
    writer = JsonDocumentWriter(tmp_path / "output")

    await ContentPipeline(writer=writer).run(_raw_record())

    files = sorted(path.name for path in (tmp_path / "output").iterdir())
    assert files == ["comparison.json", "faq.json", "product.json"]
    faq = json.loads((tmp_path / "output" / "faq.json").read_text(encoding="utf-8"))
    assert faq["page_type"] == "faq"
    assert faq["sections"][0]["items"][0]["question"] == "What is GlowBoost Vitamin C Serum?"
