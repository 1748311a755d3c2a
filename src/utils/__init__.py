from .logger import setup_logging, get_logger, PerformanceLogger, default_logger, ANSI_COLORS
from .validator import URLValidator, url_validator, extract_host, extract_path
from .pattern_matcher import PatternMatcher, pattern_matcher
from .segment_layout import SegmentLayout
from .output_formatter import OutputFormatter, format_issue, format_issues

__all__ = [
    "setup_logging",
    "get_logger",
    "PerformanceLogger",
    "default_logger",
    "ANSI_COLORS",
    "URLValidator",
    "url_validator",
    "extract_host",
    "extract_path",
    "PatternMatcher",
    "pattern_matcher",
    "SegmentLayout",
    "OutputFormatter",
    "format_issue",
    "format_issues",
]
