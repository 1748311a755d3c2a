from dataclasses import dataclass
from enum import Enum


class HighlightType(Enum):
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    NONE = "none"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]


_PRIORITY = {
    HighlightType.GREEN: 3,
    HighlightType.YELLOW: 2,
    HighlightType.RED: 1,
    HighlightType.NONE: 0,
}


@dataclass(frozen=True)
class HighlightSegment:
    """Half-open ``[start, end)`` span of one header line.

    Offsets are not validated here; the renderer drops segments that do not
    fit the line it paints.
    """

    start: int
    end: int
    type: HighlightType

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and start < self.end

    def is_valid_for(self, line_length: int) -> bool:
        return 0 <= self.start <= self.end <= line_length
