"""
Conversion between character offsets and LSP line/character positions.

Offsets are Python string indices; the character part of a position is
counted in the client's units (UTF-16 code units unless another position
encoding was negotiated), as reported by a pygls PositionCodec.
"""

from bisect import bisect_right

from lsprotocol.types import Position, Range
from pygls.workspace.position_codec import PositionCodec

from fan.core.ir import Span


class LineIndex:
    """
    Line start table for one document text.

    Out-of-range positions are clamped rather than rejected: a line past the
    end maps to the end of the text and a character past the end of a line
    maps to the start of the next line.
    """

    def __init__(self, text: str, codec: PositionCodec | None = None):
        self.text = text
        self.codec = codec or PositionCodec()
        self.line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self.line_starts.append(i + 1)

    def position_at(self, offset: int) -> Position:
        """LSP position of a character offset."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self.line_starts, offset) - 1
        prefix = self.text[self.line_starts[line] : offset]
        return Position(line=line, character=self.codec.client_num_units(prefix))

    def offset_at(self, position: Position) -> int:
        """Character offset of an LSP position."""
        if position.line >= len(self.line_starts):
            return len(self.text)
        if position.line < 0:
            return 0

        line_start = self.line_starts[position.line]
        if position.line + 1 < len(self.line_starts):
            next_line_start = self.line_starts[position.line + 1]
        else:
            next_line_start = len(self.text)

        # A position inside a multi-unit character lands after that character
        units = 0
        for offset in range(line_start, next_line_start):
            if units >= position.character:
                return offset
            units += self.codec.client_num_units(self.text[offset])
        return next_line_start

    def range_of(self, span: Span) -> Range:
        """LSP range covering a span."""
        return Range(start=self.position_at(span.start), end=self.position_at(span.end))
