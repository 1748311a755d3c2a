from typing import List, Sequence

from ..models.highlight import HighlightSegment, HighlightType
from .pattern_matcher import pattern_matcher


class SegmentLayout:
    """Non-overlapping highlight placement with colour priority.

    A candidate span is rejected when it overlaps an accepted segment of
    strictly higher priority (GREEN > YELLOW > RED > NONE). Otherwise every
    overlapping segment of lower or equal priority is evicted and the
    candidate is accepted, so among equal priorities the later candidate wins.
    """

    def __init__(self):
        self._segments: List[HighlightSegment] = []

    def add(self, start: int, end: int, type: HighlightType) -> bool:
        priority = type.priority
        for seg in self._segments:
            if seg.type.priority > priority and seg.overlaps(start, end):
                return False

        self._segments = [
            seg for seg in self._segments
            if not (seg.type.priority <= priority and seg.overlaps(start, end))
        ]
        self._segments.append(HighlightSegment(start, end, type))
        return True

    def add_pattern_matches(self, line: str, patterns: Sequence[str], type: HighlightType) -> int:
        """Feed every occurrence of every pattern, in list order; returns accepted count."""
        if not line or not patterns:
            return 0
        accepted = 0
        for pattern in patterns:
            for start, end in pattern_matcher.find_spans(line, pattern):
                if self.add(start, end, type):
                    accepted += 1
        return accepted

    def segments(self) -> List[HighlightSegment]:
        return list(self._segments)

    def __len__(self) -> int:
        return len(self._segments)
