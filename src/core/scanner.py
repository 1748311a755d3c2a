import concurrent.futures
import threading
import time
from typing import Any, Dict, Generator, Iterable, List, Optional

from ..models.result import AnalysisReport, ScanSummary
from ..models.traffic import TrafficRecord
from ..utils.logger import PerformanceLogger, get_logger
from .evaluator import HeaderEvaluator

logger = get_logger("scanner")


class ResultsStore:
    """Latest report per endpoint key; a put replaces the previous one whole."""

    def __init__(self):
        self._reports: Dict[str, AnalysisReport] = {}
        self._lock = threading.Lock()

    def put(self, report: AnalysisReport) -> Optional[AnalysisReport]:
        with self._lock:
            previous = self._reports.get(report.endpoint_key)
            self._reports[report.endpoint_key] = report
        return previous

    def get(self, endpoint_key: str) -> Optional[AnalysisReport]:
        with self._lock:
            return self._reports.get(endpoint_key)

    def snapshot(self) -> List[AnalysisReport]:
        with self._lock:
            return list(self._reports.values())

    def clear(self):
        with self._lock:
            self._reports.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)

    def __contains__(self, endpoint_key: str) -> bool:
        with self._lock:
            return endpoint_key in self._reports


class BatchAnalyzer:
    def __init__(
        self,
        evaluator: Optional[HeaderEvaluator] = None,
        store: Optional[ResultsStore] = None,
        parallel: int = 6,
    ):
        self.evaluator = evaluator or HeaderEvaluator()
        self.store = store if store is not None else ResultsStore()
        self.parallel = max(1, int(parallel))
        self.perf = PerformanceLogger()
        self._stats_lock = threading.Lock()
        self.stats = {
            "records_processed": 0,
            "failing": 0,
            "errors": 0,
            "start_time": None,
            "end_time": None,
        }

    def _analyze_one(self, record: TrafficRecord) -> AnalysisReport:
        report = self.evaluator.analyze(record)
        self.store.put(report)
        return report

    def _count(self, key: str):
        with self._stats_lock:
            self.stats[key] += 1

    def analyze_records(self, records: Iterable[TrafficRecord]) -> Generator[AnalysisReport, None, None]:
        """Evaluate records concurrently, yielding reports as they complete.

        A record whose evaluation raises is logged, counted and skipped.
        """
        records = list(records)
        self.stats.update({
            "start_time": time.time(),
            "end_time": None,
            "records_processed": 0,
            "failing": 0,
            "errors": 0,
        })
        logger.debug(f"Starting analysis of {len(records)} records with concurrency {self.parallel}")
        with self.perf.measure("batch_analysis", {"records": len(records)}), \
                concurrent.futures.ThreadPoolExecutor(max_workers=self.parallel) as executor:
            fut_to_record = {executor.submit(self._analyze_one, r): r for r in records}

            for future in concurrent.futures.as_completed(fut_to_record):
                record = fut_to_record[future]
                try:
                    report = future.result()
                except Exception as e:
                    self._count("errors")
                    logger.error(f"Analysis failed for {record.endpoint_key}: {e}")
                    continue

                self._count("records_processed")
                if report.has_fail:
                    self._count("failing")
                yield report

        self.stats["end_time"] = time.time()
        logger.debug(
            f"Analysis completed: {self.stats['records_processed']} processed, "
            f"{self.stats['failing']} with failures, {self.stats['errors']} errors"
        )

    def summarize(self, reports: List[AnalysisReport], excluded: int = 0) -> ScanSummary:
        start = self.stats.get("start_time") or time.time()
        end = self.stats.get("end_time") or time.time()
        return ScanSummary(
            start_time=start,
            end_time=end,
            total_records=self.stats["records_processed"] + self.stats["errors"],
            errors=self.stats["errors"],
            excluded=excluded,
            reports=list(reports),
        )

    def get_stats(self) -> Dict[str, Any]:
        start, end = self.stats.get("start_time"), self.stats.get("end_time")
        if start and end:
            duration = end - start
        elif start:
            duration = time.time() - start
        else:
            duration = 0.0

        stats = dict(self.stats)
        stats["duration_seconds"] = round(duration, 2)
        stats["records_per_second"] = (
            round(stats["records_processed"] / duration, 2) if duration > 0 else 0
        )
        return stats
