from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Sequence, Union
import json
import time

from .exceptions import CheckResultException


class CheckStatus(Enum):
    OK = "OK"
    WARN = "WARN"
    FAIL = "FAIL"

    @classmethod
    def coerce(cls, value: Union["CheckStatus", str, None]) -> "CheckStatus":
        if isinstance(value, CheckStatus):
            return value
        if value is None:
            raise CheckResultException("status must not be None", field="status")
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise CheckResultException("Unknown check status", field="status", value=value)


@dataclass(frozen=True)
class CheckResult:
    """Verdict of one check against one response header.

    ``display_value`` defaults to the status name and ``raw_value`` to the empty
    string. ``message`` lets a check attach the explanation matching the branch
    that produced the verdict (see ``SecurityCheck.message_for``).
    """

    status: CheckStatus
    display_value: Optional[str] = None
    raw_value: Optional[str] = None
    message: Optional[str] = None

    def __post_init__(self):
        status = CheckStatus.coerce(self.status)
        object.__setattr__(self, "status", status)
        if self.display_value is None:
            object.__setattr__(self, "display_value", status.value)
        if self.raw_value is None:
            object.__setattr__(self, "raw_value", "")

    @classmethod
    def ok(cls, display_value: Optional[str] = None, raw_value: Optional[str] = None,
           message: Optional[str] = None) -> "CheckResult":
        return cls(CheckStatus.OK, display_value, raw_value, message)

    @classmethod
    def warn(cls, display_value: Optional[str] = None, raw_value: Optional[str] = None,
             message: Optional[str] = None) -> "CheckResult":
        return cls(CheckStatus.WARN, display_value, raw_value, message)

    @classmethod
    def fail(cls, display_value: Optional[str] = None, raw_value: Optional[str] = None,
             message: Optional[str] = None) -> "CheckResult":
        return cls(CheckStatus.FAIL, display_value, raw_value, message)

    @property
    def is_ok(self) -> bool:
        return self.status is CheckStatus.OK

    @property
    def is_warn(self) -> bool:
        return self.status is CheckStatus.WARN

    @property
    def is_fail(self) -> bool:
        return self.status is CheckStatus.FAIL

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "status": self.status.value,
            "display_value": self.display_value,
            "raw_value": self.raw_value,
        }
        if self.message:
            out["message"] = self.message
        return out


@dataclass
class AnalysisReport:
    method: str
    url: str
    status_code: int
    results: Dict[str, CheckResult] = field(default_factory=dict)
    overall_status: CheckStatus = CheckStatus.OK
    analyzed_at: float = field(default_factory=time.time)

    @property
    def endpoint_key(self) -> str:
        return f"{self.method} {self.url} {self.status_code}"

    @property
    def has_fail(self) -> bool:
        return any(r.is_fail for r in self.results.values())

    @property
    def has_warn(self) -> bool:
        return any(r.is_warn for r in self.results.values())

    @property
    def failed_checks(self) -> List[str]:
        return [name for name, r in self.results.items() if r.is_fail]

    @property
    def warned_checks(self) -> List[str]:
        return [name for name, r in self.results.items() if r.is_warn]

    def display_values(self) -> List[str]:
        return [r.display_value for r in self.results.values()]

    def to_tsv(self) -> str:
        fields = [self.method, self.url, str(self.status_code), self.overall_status.value]
        fields.extend(self.display_values())
        safe = []
        for f in fields:
            s = str(f)
            s = s.replace("\t", "\\t").replace("\n", "\\n").replace("\r", "\\r")
            safe.append(s)
        return "\t".join(safe)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "status_code": self.status_code,
            "endpoint_key": self.endpoint_key,
            "overall_status": self.overall_status.value,
            "results": {name: r.to_dict() for name, r in self.results.items()},
            "failed_checks": self.failed_checks,
            "warned_checks": self.warned_checks,
            "analyzed_at": self.analyzed_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def get_tsv_header(cls, column_names: Sequence[str]) -> str:
        return "\t".join(["method", "url", "status_code", "overall"] + list(column_names))


@dataclass
class ScanSummary:
    start_time: float
    end_time: float
    total_records: int = 0
    errors: int = 0
    excluded: int = 0
    status_distribution: Dict[str, int] = field(default_factory=dict)
    failures_by_check: Dict[str, int] = field(default_factory=dict)
    warnings_by_check: Dict[str, int] = field(default_factory=dict)
    total_duration: float = 0.0
    records_per_second: float = 0.0
    reports: List[AnalysisReport] = field(default_factory=list)

    def __post_init__(self):
        self.total_duration = max(0.0, (self.end_time - self.start_time))
        self.records_per_second = (
            (len(self.reports) / self.total_duration) if self.total_duration > 0 else 0.0
        )
        self._calculate_statistics()

    def _calculate_statistics(self):
        self.status_distribution = {s.value: 0 for s in CheckStatus}
        self.failures_by_check = {}
        self.warnings_by_check = {}
        for r in self.reports:
            self.status_distribution[r.overall_status.value] += 1
            for name in r.failed_checks:
                self.failures_by_check[name] = self.failures_by_check.get(name, 0) + 1
            for name in r.warned_checks:
                self.warnings_by_check[name] = self.warnings_by_check.get(name, 0) + 1

    @property
    def failing_reports(self) -> List[AnalysisReport]:
        return [r for r in self.reports if r.overall_status is CheckStatus.FAIL]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "total_duration": round(self.total_duration, 3),
            "total_records": self.total_records,
            "reports": len(self.reports),
            "errors": self.errors,
            "excluded": self.excluded,
            "status_distribution": self.status_distribution,
            "failures_by_check": self.failures_by_check,
            "warnings_by_check": self.warnings_by_check,
            "records_per_second": round(self.records_per_second, 2),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
