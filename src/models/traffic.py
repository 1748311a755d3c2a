from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from config.constants import (
    DEFAULT_CONFIG,
    OUTPUT_FORMATS,
    is_valid_parallel_count,
    is_valid_retry_count,
    is_valid_timeout,
    read_env_overrides,
)
from .exceptions import ConfigurationException
from .http_header import HttpHeader


@dataclass
class TrafficRecord:
    request_header: HttpHeader
    response_header: HttpHeader
    method: str
    url: str
    status_code: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def endpoint_key(self) -> str:
        return f"{self.method} {self.url} {self.status_code}"

    @classmethod
    def from_exchange(
        cls,
        request_header: HttpHeader,
        response_header: HttpHeader,
        use_ssl: bool,
        server_name: Optional[str] = None,
    ) -> Optional["TrafficRecord"]:
        """Pair a request with its response; None when the pair is incomplete."""
        method = request_header.method
        path = request_header.path
        host = request_header.value_of("Host") or server_name
        status_code = response_header.status_code
        if not method or not path or not host or status_code is None:
            return None

        scheme = "https" if use_ssl else "http"
        url = f"{scheme}://{host}{path}"
        return cls(
            request_header=request_header,
            response_header=response_header,
            method=method,
            url=url,
            status_code=status_code,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "status_code": self.status_code,
            "endpoint_key": self.endpoint_key,
            "metadata": self.metadata.copy(),
        }


@dataclass
class AnalysisConfig:
    parallel: int = DEFAULT_CONFIG['parallel_workers']
    timeout: int = DEFAULT_CONFIG['request_timeout']
    max_retries: int = DEFAULT_CONFIG['max_retries']
    user_agent: Optional[str] = None
    origin: Optional[str] = None
    proxy: Optional[str] = None
    output_format: str = DEFAULT_CONFIG['default_output_format']
    show_headers: bool = False
    show_issues: bool = False
    use_colors: bool = DEFAULT_CONFIG['enable_colors']
    log_level: str = DEFAULT_CONFIG['log_level']
    log_file: Optional[str] = None

    def validate(self):
        errors = []

        if not is_valid_parallel_count(self.parallel):
            errors.append("Parallel must be between 1 and 50")

        if not is_valid_timeout(self.timeout):
            errors.append("Timeout must be between 1 and 300 seconds")

        if not is_valid_retry_count(self.max_retries):
            errors.append("Max retries must be between 0 and 10")

        if self.output_format not in OUTPUT_FORMATS:
            errors.append(f"Output format must be one of: {', '.join(OUTPUT_FORMATS)}")

        if self.origin is not None and not self.origin.strip():
            errors.append("Origin must not be blank")

        if errors:
            raise ConfigurationException(
                "Configuration validation failed",
                context={"errors": errors, "config": self.to_dict()},
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "AnalysisConfig":
        """Defaults, then HDRSCOPE_* variables, then explicit keyword overrides."""
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, raw in read_env_overrides(environ).items():
            if key not in known:
                continue
            if known[key].type in (int, "int"):
                try:
                    values[key] = int(raw)
                except ValueError:
                    raise ConfigurationException(
                        "Environment value is not an integer", config_key=key, config_value=raw
                    )
            elif key == "output_format":
                values[key] = raw.lower()
            else:
                values[key] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "parallel": self.parallel,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "user_agent": self.user_agent,
            "origin": self.origin,
            "proxy": self.proxy,
            "output_format": self.output_format,
            "show_headers": self.show_headers,
            "show_issues": self.show_issues,
            "use_colors": self.use_colors,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
