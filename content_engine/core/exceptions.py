"""Custom exception classes for the content engine."""

from typing import Any


class ContentEngineError(Exception):
    """Base exception for all content engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Input Errors
class ValidationError(ContentEngineError):
    """A raw product field is missing or malformed."""

    def __init__(self, field: str, reason: str = "missing required field") -> None:
        self.field = field
        self.reason = reason
        super().__init__(
            f"Invalid product field '{field}': {reason}",
            {"field": field, "reason": reason},
        )


# Question Generation Errors
class InsufficientCoverageError(ContentEngineError):
    """The question templates cannot satisfy a category minimum."""

    def __init__(self, category: str, produced: int, required: int) -> None:
        self.category = category
        self.produced = produced
        self.required = required
        super().__init__(
            f"Category '{category}' produced {produced} questions, {required} required",
            {"category": category, "produced": produced, "required": required},
        )


class UnansweredQuestionError(ContentEngineError):
    """No answer rule exists for a question."""

    def __init__(self, question: str, category: str) -> None:
        self.question = question
        self.category = category
        super().__init__(
            f"No answer rule for {category} question: {question}",
            {"question": question, "category": category},
        )


# Template Errors
class TemplateConfigurationError(ContentEngineError):
    """Template definition data is unreadable or inconsistent."""

    pass


class PageAssemblyError(ContentEngineError):
    """Base class for errors scoped to a single page type."""

    def __init__(
        self,
        page_type: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.page_type = page_type
        super().__init__(message, {"page_type": page_type, **(details or {})})


class UnknownPageTypeError(PageAssemblyError):
    """No template definition exists for the page type."""

    def __init__(self, page_type: str) -> None:
        super().__init__(page_type, f"Unknown page type: {page_type}")


class MissingFieldError(PageAssemblyError):
    """A required page field has no satisfying block output."""

    def __init__(self, page_type: str, field: str, source: str | None = None) -> None:
        self.field = field
        self.source = source
        message = f"Page '{page_type}' is missing required field '{field}'"
        if source:
            message = f"{message} (source '{source}' did not resolve)"
        super().__init__(page_type, message, {"field": field, "source": source})


class TemplateValidationError(PageAssemblyError):
    """An assembled page violated one or more template rules."""

    def __init__(self, page_type: str, violations: list[Any]) -> None:
        self.violations = list(violations)
        self.rule_names = [violation.rule for violation in self.violations]
        super().__init__(
            page_type,
            f"Page '{page_type}' failed rules: {', '.join(self.rule_names)}",
            {"rules": self.rule_names},
        )


# Collaborator Errors
class DocumentLoadError(ContentEngineError):
    """The raw product record could not be read or parsed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Failed to load {path}: {message}", {"path": path})


class DocumentWriteError(ContentEngineError):
    """A page document could not be persisted."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__(f"Failed to write {target}: {message}", {"target": target})
