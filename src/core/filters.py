from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from config.constants import HTTP_METHODS, STATUS_CLASSES
from ..models.result import AnalysisReport
from .exclusion_manager import ExclusionRuleStore


@dataclass
class ReportFilter:
    """Row filter for analysed endpoints.

    Empty ``methods`` or ``status_classes`` select everything; ``text`` is a
    case-insensitive substring searched in method, URL, status code and the
    per-check display values. Endpoints excluded by the rule store are
    always hidden.
    """

    methods: Set[str] = field(default_factory=lambda: set(HTTP_METHODS))
    status_classes: Set[str] = field(default_factory=lambda: set(STATUS_CLASSES))
    text: str = ""
    exclusion_store: Optional[ExclusionRuleStore] = None

    def __post_init__(self):
        self.methods = {m.upper() for m in self.methods}
        self.status_classes = {s.lower() for s in self.status_classes}

    def reset(self):
        self.methods = set(HTTP_METHODS)
        self.status_classes = set(STATUS_CLASSES)
        self.text = ""

    def _method_ok(self, report: AnalysisReport) -> bool:
        return not self.methods or report.method.upper() in self.methods

    def _status_ok(self, report: AnalysisReport) -> bool:
        if not self.status_classes:
            return True
        code = str(report.status_code)
        return bool(code) and f"{code[0]}xx" in self.status_classes

    def _text_ok(self, report: AnalysisReport) -> bool:
        needle = (self.text or "").strip().lower()
        if not needle:
            return True
        haystack = [report.method, report.url, str(report.status_code)] + report.display_values()
        return any(needle in (value or "").lower() for value in haystack)

    def is_excluded(self, report: AnalysisReport) -> bool:
        return self.exclusion_store is not None and self.exclusion_store.should_exclude(
            report.method, report.url
        )

    def matches(self, report: AnalysisReport) -> bool:
        return (
            self._method_ok(report)
            and self._status_ok(report)
            and self._text_ok(report)
            and not self.is_excluded(report)
        )

    def apply(self, reports: Iterable[AnalysisReport]) -> List[AnalysisReport]:
        return [r for r in reports if self.matches(r)]
