import csv
import io
import json
from typing import List, Optional, Sequence, TextIO

from config.constants import OUTPUT_FORMATS
from ..models.exceptions import OutputException
from ..models.result import AnalysisReport, CheckResult, CheckStatus, ScanSummary

_ISSUE_LABELS = {
    CheckStatus.OK: "OK",
    CheckStatus.WARN: "WARNING",
    CheckStatus.FAIL: "FAIL",
}


def format_issue(name: str, result: CheckResult, message: str) -> str:
    label = _ISSUE_LABELS[result.status]
    if result.is_ok:
        return f"{name}: {label}\n  {result.display_value}"
    return f"{name}: {label}\n  {message}\n  Current: {result.display_value}"


def format_issues(report: AnalysisReport, checks: Sequence) -> str:
    """Issues pane text, one block per check in registry order."""
    blocks: List[str] = []
    for check in checks:
        result = report.results.get(check.name)
        if result is None:
            continue
        blocks.append(format_issue(check.name, result, check.message_for(result)))
    return "\n\n".join(blocks)


class OutputFormatter:
    def __init__(self, column_names: Optional[Sequence[str]] = None):
        self.supported_formats = list(OUTPUT_FORMATS)
        self.column_names = list(column_names or [])

    def _check_format(self, format_type: str) -> str:
        ft = (format_type or "").lower()
        if ft not in self.supported_formats:
            raise OutputException(f"Unsupported format: {format_type}", output_format=format_type)
        return ft

    def format_report(self, report: AnalysisReport, format_type: str = "text") -> str:
        ft = self._check_format(format_type)
        if ft == "tsv":
            return report.to_tsv()
        if ft == "json":
            return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
        if ft == "jsonl":
            return json.dumps(report.to_dict(), ensure_ascii=False)
        if ft == "csv":
            return self._format_csv(report)
        return self._format_text(report)

    def format_reports(self, reports: List[AnalysisReport], format_type: str = "text") -> List[str]:
        ft = self._check_format(format_type)
        if ft == "json":
            data = [r.to_dict() for r in reports]
            return [json.dumps(data, indent=2, ensure_ascii=False)]
        return [self.format_report(r, ft) for r in reports]

    def _format_csv(self, report: AnalysisReport) -> str:
        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL)
        row = [report.method, report.url, report.status_code, report.overall_status.value]
        row.extend(report.display_values())
        writer.writerow(row)
        return output.getvalue().strip()

    def _format_text(self, report: AnalysisReport) -> str:
        lines = [f"[{report.overall_status.value}] {report.method} {report.url} ({report.status_code})"]
        names = list(report.results.keys())
        labels = self.column_names if len(self.column_names) == len(names) else names
        width = max((len(l) for l in labels), default=0)
        for label, name in zip(labels, names):
            result = report.results[name]
            lines.append(f"  {label.ljust(width)}  {result.status.value:<4}  {result.display_value}")
        return "\n".join(lines)

    def get_header(self, format_type: str = "tsv") -> str:
        ft = self._check_format(format_type)
        if ft == "tsv":
            return AnalysisReport.get_tsv_header(self.column_names)
        if ft == "csv":
            output = io.StringIO()
            csv.writer(output).writerow(["method", "url", "status_code", "overall"] + self.column_names)
            return output.getvalue().strip()
        return ""

    def write_reports(
        self,
        reports: List[AnalysisReport],
        output_file: TextIO,
        format_type: str = "text",
        include_header: bool = True,
    ):
        ft = self._check_format(format_type)
        if ft == "json":
            json.dump([r.to_dict() for r in reports], output_file, indent=2, ensure_ascii=False)
            output_file.write("\n")
            return

        if include_header and ft in ("tsv", "csv"):
            output_file.write(self.get_header(ft) + "\n")

        for r in reports:
            output_file.write(self.format_report(r, ft) + "\n")
            if ft == "text":
                output_file.write("\n")

    def create_summary_report(self, summary: ScanSummary, format_type: str = "text") -> str:
        return summary.to_json() if format_type.lower() == "json" else self._create_text_summary(summary)

    def _create_text_summary(self, summary: ScanSummary) -> str:
        lines: List[str] = []
        lines.append("=" * 60)
        lines.append("hdrscope summary")
        lines.append("=" * 60)
        lines.append(f"Duration: {summary.total_duration:.2f} seconds")
        lines.append(f"Endpoints analysed: {len(summary.reports)}")
        if summary.excluded:
            lines.append(f"Excluded by rules/filters: {summary.excluded}")
        if summary.errors:
            lines.append(f"Errors: {summary.errors}")

        lines.append("\nOverall status:")
        for status in ("FAIL", "WARN", "OK"):
            lines.append(f"  {status}: {summary.status_distribution.get(status, 0)}")

        if summary.failures_by_check:
            lines.append("\nFailures by check:")
            for name, count in sorted(summary.failures_by_check.items(), key=lambda kv: -kv[1]):
                lines.append(f"  {name}: {count}")
        if summary.warnings_by_check:
            lines.append("\nWarnings by check:")
            for name, count in sorted(summary.warnings_by_check.items(), key=lambda kv: -kv[1]):
                lines.append(f"  {name}: {count}")
        lines.append("=" * 60)
        return "\n".join(lines)
