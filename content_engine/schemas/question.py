"""User question schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

QuestionCategory = Literal["informational", "usage", "safety", "purchase", "comparison"]

# Fixed output order for generated questions and FAQ sections.
QUESTION_CATEGORIES: tuple[QuestionCategory, ...] = (
    "informational",
    "usage",
    "safety",
    "purchase",
    "comparison",
)


class UserQuestion(BaseModel):
    """A categorized question derived from a product."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    category: QuestionCategory
    topic: str = ""  # template key used for answer lookup
