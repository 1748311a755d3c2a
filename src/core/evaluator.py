from collections import OrderedDict
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..checks import SecurityCheck, default_checks
from ..models.exceptions import ConfigurationException
from ..models.http_header import HttpHeader
from ..models.result import AnalysisReport, CheckResult, CheckStatus
from ..models.traffic import TrafficRecord
from ..utils.logger import get_logger
from .context import EvaluationContext

logger = get_logger("evaluator")


class HeaderEvaluator:
    """Runs an ordered set of checks over one response header.

    The order of ``checks`` is the evaluation order; checks that read a
    context key must come after the check that writes it.
    """

    def __init__(self, checks: Optional[Iterable[SecurityCheck]] = None):
        self.checks: Tuple[SecurityCheck, ...] = tuple(checks) if checks is not None else default_checks()
        self._validate_checks()

    def _validate_checks(self):
        seen = set()
        for check in self.checks:
            if not isinstance(check, SecurityCheck):
                raise ConfigurationException(
                    "Registered check does not implement SecurityCheck",
                    config_key="checks",
                    config_value=repr(check),
                )
            if not check.name:
                raise ConfigurationException("Check has no name", config_key="checks", config_value=repr(check))
            if check.name in seen:
                raise ConfigurationException(
                    "Duplicate check name", config_key="checks", config_value=check.name
                )
            seen.add(check.name)

    @property
    def check_names(self) -> List[str]:
        return [c.name for c in self.checks]

    @property
    def column_names(self) -> List[str]:
        return [c.column_name for c in self.checks]

    def get_check(self, name: str) -> Optional[SecurityCheck]:
        for check in self.checks:
            if check.name == name:
                return check
        return None

    def evaluate(
        self,
        header: HttpHeader,
        request_origin: Optional[str] = None,
        context: Optional[EvaluationContext] = None,
    ) -> "OrderedDict[str, CheckResult]":
        ctx = context if context is not None else EvaluationContext(request_origin=request_origin)
        if context is not None and request_origin is not None:
            ctx[EvaluationContext.ORIGIN_KEY] = request_origin

        results: "OrderedDict[str, CheckResult]" = OrderedDict()
        for check in self.checks:
            result = check.evaluate(header, ctx)
            results[check.name] = result
            logger.debug(f"{check.name}: {result.status.value} ({result.display_value})")
        return results

    def analyze(self, record: TrafficRecord) -> AnalysisReport:
        origin = record.request_header.value_of("Origin") if record.request_header else None
        results = self.evaluate(record.response_header, request_origin=origin)
        report = AnalysisReport(
            method=record.method,
            url=record.url,
            status_code=record.status_code,
            results=dict(results),
            overall_status=self.overall_status(results),
        )
        logger.debug(f"Analyzed {report.endpoint_key}: {report.overall_status.value}")
        return report

    def overall_status(self, results: Mapping[str, CheckResult]) -> CheckStatus:
        return overall_status(self.checks, results)


def overall_status(checks: Sequence[SecurityCheck], results: Mapping[str, CheckResult]) -> CheckStatus:
    """FAIL beats WARN beats OK, counting only checks that affect the aggregate."""
    warned = False
    for check in checks:
        if not check.affects_overall_status:
            continue
        result = results.get(check.name)
        if result is None:
            continue
        if result.is_fail:
            return CheckStatus.FAIL
        if result.is_warn:
            warned = True
    return CheckStatus.WARN if warned else CheckStatus.OK
