#!/usr/bin/env python3
import argparse
import concurrent.futures
import os
import shutil
import sys
from typing import List, Optional

from config.constants import (
    DEFAULT_CONFIG,
    EXIT_CODES,
    HTTP_METHODS,
    LIMITS,
    OUTPUT_FORMATS,
    STATUS_CLASSES,
    get_version,
)
from src.core.evaluator import HeaderEvaluator
from src.core.exclusion_manager import ExclusionRuleStore
from src.core.fetcher import HeaderFetcher
from src.core.filters import ReportFilter
from src.core.renderer import HeaderRenderer
from src.core.scanner import BatchAnalyzer
from src.models.exceptions import ConfigurationException, NetworkException, ValidationException
from src.models.exclusion import ExclusionRuleType
from src.models.http_header import HttpHeader
from src.models.result import AnalysisReport, CheckStatus
from src.models.traffic import AnalysisConfig, TrafficRecord
from src.utils.logger import setup_logging, get_logger
from src.utils.output_formatter import OutputFormatter, format_issues
from src.utils.validator import url_validator

logger = get_logger("cli")

TITLE = "hdrscope - HTTP security header analyzer"


class WideFormatter(argparse.RawTextHelpFormatter):
    def __init__(self, prog):
        width = shutil.get_terminal_size((100, 20)).columns
        super().__init__(prog, max_help_position=32, width=max(90, min(width, 140)))


class HdrScopeCLI:
    def __init__(self):
        self.parser = self._create_parser()
        self.config: Optional[AnalysisConfig] = None
        self.evaluator = HeaderEvaluator()
        self.exclusions = ExclusionRuleStore()
        self.network_errors = 0
        self.args: Optional[argparse.Namespace] = None

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog="hdrscope", description=TITLE, formatter_class=WideFormatter)
        parser.add_argument("-V", "--version", action="version", version=f"hdrscope {get_version()}")

        inp = parser.add_argument_group("Input Options")
        inp.add_argument("targets", nargs="*", metavar="target", help="URL(s) to analyse (scheme defaults to https://)")
        inp.add_argument("-i", "--input", dest="input_file", help="Read targets from file (one URL per line)")
        inp.add_argument("--raw-response", help="Analyse a saved raw HTTP response instead of fetching")
        inp.add_argument("--raw-request", help="Raw HTTP request paired with --raw-response (Origin, Host, path)")
        inp.add_argument("--url", help="URL of the saved exchange (when no --raw-request is given)")

        net = parser.add_argument_group("Network Options")
        net.add_argument("-t", "--timeout", type=int, default=None, help=f'Request timeout in seconds (default: {DEFAULT_CONFIG["request_timeout"]})')
        net.add_argument("-P", "--parallel", type=int, default=None, help=f'Concurrent requests (default: {DEFAULT_CONFIG["parallel_workers"]}, max: {LIMITS["max_parallel_workers"]})')
        net.add_argument("--retries", dest="max_retries", type=int, default=None, help=f'Retries for transient failures (default: {DEFAULT_CONFIG["max_retries"]})')
        net.add_argument("--ua", "--user-agent", dest="user_agent", help="Custom User-Agent string")
        net.add_argument("--origin", help="Send this Origin header (enables CORS reflection detection)")
        net.add_argument("--proxy", help="HTTP proxy URL")
        net.add_argument("--method", default=None, choices=HTTP_METHODS, help="HTTP method (default: GET)")

        flt = parser.add_argument_group("Filter Options")
        flt.add_argument("--exclude-host", action="append", default=[], help="Hide endpoints on this host (repeatable)")
        flt.add_argument("--exclude-path", action="append", default=[], help="Hide endpoints with this path; trailing * matches a prefix (repeatable)")
        flt.add_argument("--exclude-endpoint", action="append", default=[], help='Hide this exact "METHOD URL" (repeatable)')
        flt.add_argument("--filter-method", action="append", default=[], choices=HTTP_METHODS, help="Only show these methods (repeatable)")
        flt.add_argument("--filter-status", action="append", default=[], choices=STATUS_CLASSES, help="Only show these status classes, e.g. 2xx (repeatable)")
        flt.add_argument("--filter-text", default="", help="Only show rows containing this text (case-insensitive)")

        out = parser.add_argument_group("Output Options")
        out.add_argument("-f", "--format", dest="output_format", default=None, choices=OUTPUT_FORMATS, help=f'Output format (default: {DEFAULT_CONFIG["default_output_format"]})')
        out.add_argument("--headers", dest="show_headers", action="store_true", help="Print the response headers with highlighting")
        out.add_argument("--issues", dest="show_issues", action="store_true", help="Print the per-check explanation")
        out.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
        out.add_argument("--fail-on-issues", action="store_true", help=f'Exit with {EXIT_CODES["ISSUES_FOUND"]} when a shown endpoint has an overall FAIL')
        out.add_argument("-o", "--output", help="Write results to file")
        out.add_argument("--quiet", action="store_true", help="Suppress summary and progress messages")
        out.add_argument("--verbose", action="store_true", help="Debug logging")
        out.add_argument("--log-file", help="Also write logs to this file")

        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(argv)

    def _create_config(self, args: argparse.Namespace) -> AnalysisConfig:
        level = "DEBUG" if args.verbose else None
        config = AnalysisConfig.from_env(
            parallel=args.parallel,
            timeout=args.timeout,
            max_retries=args.max_retries,
            user_agent=args.user_agent,
            origin=args.origin,
            proxy=args.proxy,
            output_format=args.output_format,
            log_level=level,
            log_file=args.log_file,
        )
        config.show_headers = args.show_headers
        config.show_issues = args.show_issues
        config.use_colors = not args.no_color and not args.output and sys.stdout.isatty()
        config.validate()
        return config

    def _load_exclusions(self, args: argparse.Namespace):
        for pattern in args.exclude_host:
            self.exclusions.add(ExclusionRuleType.HOST, pattern)
        for pattern in args.exclude_path:
            self.exclusions.add(ExclusionRuleType.PATH, pattern)
        for pattern in args.exclude_endpoint:
            self.exclusions.add(ExclusionRuleType.ENDPOINT, pattern)

    def _create_filter(self, args: argparse.Namespace) -> ReportFilter:
        report_filter = ReportFilter(exclusion_store=self.exclusions)
        if args.filter_method:
            report_filter.methods = {m.upper() for m in args.filter_method}
        if args.filter_status:
            report_filter.status_classes = set(args.filter_status)
        report_filter.text = args.filter_text or ""
        return report_filter

    def _load_targets(self, args: argparse.Namespace) -> List[str]:
        targets: List[str] = []

        for raw in args.targets or []:
            try:
                targets.append(url_validator.normalize_target(raw))
            except ValidationException as e:
                raise ConfigurationException(f"Invalid target URL: {raw}", config_key="target", config_value=raw) from e

        if args.input_file:
            try:
                with open(args.input_file, "r", encoding="utf-8") as f:
                    for line_num, line in enumerate(f, 1):
                        url = line.strip()
                        if not url or url.startswith("#"):
                            continue
                        try:
                            targets.append(url_validator.normalize_target(url))
                        except ValidationException as e:
                            logger.warning(f"Invalid target on line {line_num}: {url} - {e.message}")
            except OSError as e:
                raise ConfigurationException(f"Failed to read input file: {e}", config_key="input", config_value=args.input_file)
            logger.debug(f"Loaded {len(targets)} targets")

        if len(targets) > LIMITS['max_targets_per_run']:
            raise ConfigurationException("Too many targets", config_key="targets", config_value=len(targets))
        return targets

    def _load_raw_exchange(self, args: argparse.Namespace) -> TrafficRecord:
        try:
            with open(args.raw_response, "rb") as f:
                response_header = HttpHeader.parse(f.read())
            request_header = HttpHeader(status_line="")
            if args.raw_request:
                with open(args.raw_request, "rb") as f:
                    request_header = HttpHeader.parse(f.read())
        except OSError as e:
            raise ConfigurationException(f"Cannot read raw exchange: {e}", config_key="raw_response")

        if response_header.status_code is None:
            raise ConfigurationException(
                "Raw response has no status line", config_key="raw_response", config_value=response_header.status_line
            )

        if args.url:
            method = (args.method or request_header.method or DEFAULT_CONFIG['default_method']).upper()
            return TrafficRecord(
                request_header=request_header,
                response_header=response_header,
                method=method,
                url=args.url,
                status_code=response_header.status_code,
            )

        # saved exchanges without --url are assumed to be TLS
        record = TrafficRecord.from_exchange(request_header, response_header, use_ssl=True)
        if record is None:
            raise ConfigurationException(
                "Cannot determine the URL: pass --url or a --raw-request with a Host header",
                config_key="url",
            )
        return record

    def _fetch_records(self, targets: List[str], args: argparse.Namespace) -> List[TrafficRecord]:
        config = self.config
        method = args.method or DEFAULT_CONFIG['default_method']
        records: List[Optional[TrafficRecord]] = [None] * len(targets)

        with HeaderFetcher(
            timeout=config.timeout,
            max_retries=config.max_retries,
            user_agent=config.user_agent,
            proxy=config.proxy,
            origin=config.origin,
        ) as fetcher:
            with concurrent.futures.ThreadPoolExecutor(max_workers=config.parallel) as executor:
                fut_to_index = {executor.submit(fetcher.fetch, url, method): i for i, url in enumerate(targets)}
                for future in concurrent.futures.as_completed(fut_to_index):
                    index = fut_to_index[future]
                    try:
                        records[index] = future.result()
                    except NetworkException as e:
                        self.network_errors += 1
                        logger.error(f"Fetch failed for {targets[index]}: {e.message}")

        return [r for r in records if r is not None]

    def _write_output(self, reports: List[AnalysisReport], records: List[TrafficRecord]):
        config = self.config
        formatter = OutputFormatter(self.evaluator.column_names)
        renderer = HeaderRenderer(use_colors=config.use_colors)
        response_by_key = {r.endpoint_key: r.response_header for r in records}

        output_file = None
        if self.args.output:
            d = os.path.dirname(self.args.output)
            if d:
                os.makedirs(d, exist_ok=True)
            output_file = open(self.args.output, "w", encoding="utf-8")

        try:
            out_stream = output_file or sys.stdout
            if config.output_format != "text":
                formatter.write_reports(reports, out_stream, config.output_format, include_header=not self.args.quiet)
            else:
                for report in reports:
                    out_stream.write(formatter.format_report(report, "text") + "\n")
                    header = response_by_key.get(report.endpoint_key)
                    if config.show_headers and header is not None:
                        out_stream.write("\n" + renderer.render_headers(header, self.evaluator.checks, report.results) + "\n")
                    if config.show_issues:
                        issues = format_issues(report, self.evaluator.checks)
                        out_stream.write("\n" + "\n".join("  " + l for l in issues.splitlines()) + "\n")
                    out_stream.write("\n")
            out_stream.flush()
        finally:
            if output_file:
                output_file.close()

    def run(self, args: argparse.Namespace) -> int:
        self.args = args
        try:
            self.config = self._create_config(args)
            setup_logging(
                level=self.config.log_level if (args.verbose or "HDRSCOPE_LOG_LEVEL" in os.environ) else "WARNING",
                log_file=self.config.log_file,
                enable_console=not args.quiet,
                use_colors=not args.no_color,
            )
            self._load_exclusions(args)
            report_filter = self._create_filter(args)

            if args.raw_response:
                records = [self._load_raw_exchange(args)]
            else:
                targets = self._load_targets(args)
                if not targets:
                    logger.error("No valid targets provided")
                    self.parser.print_usage(sys.stderr)
                    return EXIT_CODES["USAGE_ERROR"]
                records = self._fetch_records(targets, args)

            order = {r.endpoint_key: i for i, r in enumerate(records)}
            analyzer = BatchAnalyzer(self.evaluator, parallel=self.config.parallel)
            reports = sorted(analyzer.analyze_records(records), key=lambda r: order.get(r.endpoint_key, 0))

            shown = report_filter.apply(reports)
            self._write_output(shown, records)

            if not args.quiet and self.config.output_format == "text":
                summary = analyzer.summarize(shown, excluded=len(reports) - len(shown))
                print(OutputFormatter().create_summary_report(summary), file=sys.stderr)

            if args.fail_on_issues and any(r.overall_status is CheckStatus.FAIL for r in shown):
                return EXIT_CODES["ISSUES_FOUND"]
            if self.network_errors or analyzer.stats["errors"]:
                return EXIT_CODES["NETWORK_ERROR"]
            return EXIT_CODES["SUCCESS"]

        except (ConfigurationException, ValidationException) as e:
            logger.error(str(e))
            return EXIT_CODES["CONFIG_ERROR"]
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            return EXIT_CODES["UNKNOWN_ERROR"]
        except Exception as e:
            logger.error(f"Analysis failed: {e}")
            if args.verbose:
                logger.exception("Detailed error:")
            return EXIT_CODES["UNKNOWN_ERROR"]


def main(argv: Optional[List[str]] = None):
    cli = HdrScopeCLI()
    args = cli.parse_arguments(argv)
    sys.exit(cli.run(args))


if __name__ == "__main__":
    main()
