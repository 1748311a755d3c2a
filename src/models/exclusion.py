from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict
import uuid

from .exceptions import ExclusionRuleException


class ExclusionRuleType(Enum):
    HOST = "Host"
    PATH = "Path"
    ENDPOINT = "Endpoint"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "ExclusionRuleType":
        key = (value or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ExclusionRuleException("Unknown exclusion rule type", field="type", value=value)


def _new_rule_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ExclusionRule:
    """Filter that hides matching endpoints from analysis output.

    HOST compares the URL host case-insensitively, PATH compares the URL path
    (a trailing ``*`` turns the pattern into a prefix), ENDPOINT compares
    ``"<method> <url>"`` exactly.
    """

    type: ExclusionRuleType
    pattern: str
    id: str = field(default_factory=_new_rule_id)

    def __post_init__(self):
        if not isinstance(self.type, ExclusionRuleType):
            object.__setattr__(self, "type", ExclusionRuleType.from_string(str(self.type)))
        if self.id is None or not str(self.id).strip():
            raise ExclusionRuleException("id must not be blank", field="id", value=self.id)
        if self.pattern is None or not str(self.pattern).strip():
            raise ExclusionRuleException("pattern must not be blank", field="pattern", value=self.pattern)

    @classmethod
    def create(cls, rule_type: ExclusionRuleType, pattern: str) -> "ExclusionRule":
        return cls(type=rule_type, pattern=pattern)

    def with_changes(self, rule_type: ExclusionRuleType, pattern: str) -> "ExclusionRule":
        return ExclusionRule(type=rule_type, pattern=pattern, id=self.id)

    def matches(self, method: str, url: str) -> bool:
        # imported lazily: utils imports models
        from ..utils.validator import extract_host, extract_path

        if self.type is ExclusionRuleType.HOST:
            host = extract_host(url)
            return host is not None and host.lower() == self.pattern.lower()

        if self.type is ExclusionRuleType.PATH:
            path = extract_path(url)
            if path is None:
                return False
            if self.pattern.endswith("*"):
                return path.startswith(self.pattern[:-1])
            return path == self.pattern

        return f"{method} {url}" == self.pattern

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.name, "pattern": self.pattern}

    def __str__(self) -> str:
        return f"{self.type.display_name}: {self.pattern}"
