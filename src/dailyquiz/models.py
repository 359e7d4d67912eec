"""Pydantic data models for generated questions and selection results."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CorrectOption = Literal["a", "b", "c", "d"]
SelectionMode = Literal["least_similar", "filter_duplicates"]


class QuestionOptions(BaseModel):
    """The four answer choices of a multiple-choice question."""

    model_config = ConfigDict(extra="forbid")

    a: str = Field(min_length=1)
    b: str = Field(min_length=1)
    c: str = Field(min_length=1)
    d: str = Field(min_length=1)


class Question(BaseModel):
    """A single generated multiple-choice question.

    Unknown fields are kept, so records coming from a generator pass
    through selection without losing data.

    Example:
        >>> question = Question(
        ...     content="Which river is the longest in India?",
        ...     options={"a": "Ganga", "b": "Godavari", "c": "Yamuna", "d": "Narmada"},
        ...     correct_option="a",
        ...     explanation="The Ganga flows about 2,525 km.",
        ...     category="Geography",
        ... )
    """

    model_config = ConfigDict(extra="allow")

    content: str = Field(min_length=10, description="Question body shown to the user")
    options: QuestionOptions
    correct_option: CorrectOption
    explanation: str = Field(min_length=10)
    category: str = Field(min_length=1)

    @field_validator("content", "explanation", "category")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject strings made only of whitespace."""
        if not v.strip():
            raise ValueError("must be a non-empty string (not just whitespace)")
        return v


class CandidateScore(BaseModel):
    """Similarity of one candidate against the recent corpus."""

    model_config = ConfigDict(extra="forbid")

    index: int = Field(ge=0, description="Position in the candidate list")
    content: str
    max_similarity: float = Field(ge=0.0, le=1.0)
    closest_match: str | None = Field(
        default=None, description="Corpus text with the highest similarity"
    )
    selected: bool = False


class SelectionReport(BaseModel):
    """Outcome of one selection run, for auditing and reports."""

    model_config = ConfigDict(extra="forbid")

    mode: SelectionMode
    target_count: int | None = Field(default=None, ge=0)
    threshold: float | None = Field(
        default=None, description="Duplicate threshold; above 1.0 nothing counts as a duplicate"
    )
    corpus_size: int = Field(ge=0)
    candidate_count: int = Field(ge=0)
    scores: list[CandidateScore]
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def selected_count(self) -> int:
        return sum(1 for s in self.scores if s.selected)

    def selected_indices(self) -> list[int]:
        """Indices of the kept candidates, in candidate order."""
        return [s.index for s in self.scores if s.selected]
