__version__ = "1.0.0"
__description__ = "Security header check evaluation and highlighting"

from .context import EvaluationContext
from .evaluator import HeaderEvaluator, overall_status
from .highlighter import collect_segments, line_highlight
from .exclusion_manager import ExclusionRuleStore, rule_for_host, rule_for_path, rule_for_endpoint
from .scanner import ResultsStore, BatchAnalyzer
from .filters import ReportFilter
from .fetcher import HeaderFetcher
from .renderer import HeaderRenderer, paintable_segments

__all__ = [
    'EvaluationContext',
    'HeaderEvaluator',
    'overall_status',
    'collect_segments',
    'line_highlight',
    'ExclusionRuleStore',
    'rule_for_host',
    'rule_for_path',
    'rule_for_endpoint',
    'ResultsStore',
    'BatchAnalyzer',
    'ReportFilter',
    'HeaderFetcher',
    'HeaderRenderer',
    'paintable_segments',
]
