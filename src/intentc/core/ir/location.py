"""Source location tracking for AST nodes.

Records the line, column and character span where an intent construct was
defined. Nodes synthesized by the preprocessor carry the default location
(line 0, column 0, no span) since they have no textual origin.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SourceLocation(BaseModel):
    """Source position where a construct was defined.

    Attributes:
        line: 1-indexed line number (0 for synthesized nodes)
        column: 1-indexed column number (0 for synthesized nodes)
        span: Optional (start, end) character offsets into the source
    """

    line: int = 0
    column: int = 0
    span: tuple[int, int] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_synthesized(self) -> bool:
        return self.line == 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"
