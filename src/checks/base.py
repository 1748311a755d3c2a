from abc import ABC, abstractmethod
from typing import List, MutableMapping, Optional, Tuple, Any

from ..models.http_header import HttpHeader
from ..models.highlight import HighlightSegment, HighlightType
from ..models.result import CheckResult, CheckStatus
from ..utils.segment_layout import SegmentLayout

_STATUS_COLORS = {
    CheckStatus.OK: HighlightType.GREEN,
    CheckStatus.WARN: HighlightType.YELLOW,
    CheckStatus.FAIL: HighlightType.RED,
}


def status_highlight(result: Optional[CheckResult]) -> HighlightType:
    if result is None:
        return HighlightType.NONE
    return _STATUS_COLORS.get(result.status, HighlightType.NONE)


class SecurityCheck(ABC):
    """One response-header security policy.

    Subclasses set the class attributes and implement ``evaluate``. Checks
    are stateless: anything a later check needs goes into the evaluation
    context, anything the caller needs goes into the returned result.
    """

    name: str = ""
    column_name: str = ""
    missing_message: str = ""
    affects_overall_status: bool = True

    # lowercase prefixes of the raw header lines this check colours
    header_prefixes: Tuple[str, ...] = ()

    red_patterns: Tuple[str, ...] = ()
    yellow_patterns: Tuple[str, ...] = ()
    green_patterns: Tuple[str, ...] = ()

    @abstractmethod
    def evaluate(self, header: HttpHeader, context: MutableMapping[str, Any]) -> CheckResult:
        raise NotImplementedError

    def matches_header_line(self, lowercase_line: str) -> bool:
        return lowercase_line.startswith(self.header_prefixes) if self.header_prefixes else False

    def has_patterns(self) -> bool:
        return bool(self.red_patterns or self.yellow_patterns or self.green_patterns)

    def patterns_for(self, status: CheckStatus) -> Tuple[str, ...]:
        if status is CheckStatus.FAIL:
            return tuple(self.red_patterns)
        if status is CheckStatus.WARN:
            return tuple(self.yellow_patterns)
        if status is CheckStatus.OK:
            return tuple(self.green_patterns)
        return ()

    def highlight_type(self, line: str, result: Optional[CheckResult]) -> HighlightType:
        """Whole-line colour for lines this check owns."""
        if not self.matches_header_line(line.lower()):
            return HighlightType.NONE
        return status_highlight(result)

    def highlight_segments(
        self,
        line: str,
        result: Optional[CheckResult],
        layout: Optional[SegmentLayout] = None,
    ) -> List[HighlightSegment]:
        """Pattern spans of ``line`` for ``result``; empty means whole-line colouring.

        Only the pattern list matching the result status is searched. When a
        shared ``layout`` is given the spans are placed into it, so spans
        from several checks are resolved against each other.
        """
        if not line or not self.matches_header_line(line.lower()):
            return []
        if not self.has_patterns() or result is None:
            return []

        target = layout if layout is not None else SegmentLayout()
        color = status_highlight(result)
        target.add_pattern_matches(line, self.patterns_for(result.status), color)
        return target.segments()

    def message_for(self, result: CheckResult) -> str:
        return result.message or self.missing_message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
