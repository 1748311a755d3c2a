from .result import CheckStatus, CheckResult, AnalysisReport, ScanSummary
from .http_header import HttpHeader
from .traffic import TrafficRecord, AnalysisConfig
from .highlight import HighlightType, HighlightSegment
from .exclusion import ExclusionRule, ExclusionRuleType
from .exceptions import (
    HdrScopeException,
    NetworkException,
    ValidationException,
    ConfigurationException,
    OutputException,
    CheckResultException,
    ExclusionRuleException,
)

__all__ = [
    "CheckStatus",
    "CheckResult",
    "AnalysisReport",
    "ScanSummary",
    "HttpHeader",
    "TrafficRecord",
    "AnalysisConfig",
    "HighlightType",
    "HighlightSegment",
    "ExclusionRule",
    "ExclusionRuleType",
    "HdrScopeException",
    "NetworkException",
    "ValidationException",
    "ConfigurationException",
    "OutputException",
    "CheckResultException",
    "ExclusionRuleException",
]
