"""Character spans shared by every syntax node."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class Span(BaseModel):
    """
    A region of a document's text.

    ``text[start:end]`` is the covered source. Containment is inclusive of
    both ends so an offset sitting just after the last character (where the
    editor cursor usually is) still belongs to the span.

    Attributes:
        start: Offset of the first character
        end: Offset just past the last character
    """

    start: int
    end: int

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> Span:
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")
        return self

    def contains(self, offset: int) -> bool:
        """True if offset lies within the span (both ends inclusive)."""
        return self.start <= offset <= self.end

    def encloses(self, other: Span) -> bool:
        """True if other lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"
