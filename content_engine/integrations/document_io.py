"""JSON loader and writer for raw records and page documents."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from content_engine.core.exceptions import DocumentLoadError, DocumentWriteError
from content_engine.schemas.pages import PageModel

logger = logging.getLogger(__name__)


class DocumentWriter(Protocol):
    """Persists one page document under a target identifier."""

    def write(self, target: str, document: PageModel) -> None: ...


def load_raw_product(path: Path | str) -> dict[str, Any]:
    """Read a raw product record from a JSON file."""
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DocumentLoadError(str(source), exc.strerror or str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(str(source), f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    if not isinstance(payload, dict):
        raise DocumentLoadError(str(source), "expected a JSON object")
    return payload


class JsonDocumentWriter:
    """Write each page document to `<output_dir>/<target>.json` atomically."""

    def __init__(self, output_dir: Path | str) -> None:
        self.output_dir = Path(output_dir)

    def path_for(self, target: str) -> Path:
        return self.output_dir / f"{target}.json"

    def write(self, target: str, document: PageModel) -> None:
        destination = self.path_for(target)
        payload = json.dumps(document.model_dump(mode="json"), indent=2, ensure_ascii=False)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.output_dir, prefix=f".{destination.stem}-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                    handle.write("\n")
                os.replace(tmp_name, destination)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise DocumentWriteError(target, str(exc)) from exc

        logger.info("Page document written", extra={"target": target, "path": str(destination)})


class InMemoryDocumentWriter:
    """Collects documents in a dict; used by callers that persist elsewhere."""

    def __init__(self) -> None:
        self.documents: dict[str, PageModel] = {}

    def write(self, target: str, document: PageModel) -> None:
        self.documents[target] = document
