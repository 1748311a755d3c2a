from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union
import re

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass
class HttpHeader:
    """Parsed HTTP header block (start line plus header fields).

    Lookups are case-insensitive on the field name and return values with
    surrounding whitespace trimmed. ``raw_lines`` keeps every field line as it
    was transmitted, which is what the highlighter works on.
    """

    status_line: str = ""
    lines: List[str] = field(default_factory=list)
    fields: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def parse(cls, raw: Union[bytes, str]) -> "HttpHeader":
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        text = raw or ""

        all_lines = _LINE_SPLIT.split(text)
        start_line = all_lines[0] if all_lines else ""
        lines: List[str] = []
        fields: List[Tuple[str, str]] = []
        for line in all_lines[1:]:
            if line == "":
                break
            lines.append(line)
            name, sep, value = line.partition(":")
            if not sep:
                continue
            fields.append((name.strip(), value))
        return cls(status_line=start_line, lines=lines, fields=fields)

    @classmethod
    def from_pairs(cls, start_line: str, pairs: Iterable[Tuple[str, str]]) -> "HttpHeader":
        lines: List[str] = []
        fields: List[Tuple[str, str]] = []
        for name, value in pairs:
            value = "" if value is None else str(value)
            lines.append(f"{name}: {value}")
            fields.append((name, value))
        return cls(status_line=start_line or "", lines=lines, fields=fields)

    @classmethod
    def from_urllib3(cls, start_line: str, headers) -> "HttpHeader":
        """Build from an urllib3 ``HTTPHeaderDict``, keeping repeated fields."""
        pairs: List[Tuple[str, str]] = []
        getlist = getattr(headers, "getlist", None)
        for name in headers.keys():
            if getlist is not None:
                for value in getlist(name):
                    pairs.append((name, value))
            else:
                pairs.append((name, headers[name]))
        return cls.from_pairs(start_line, pairs)

    def value_of(self, name: str) -> Optional[str]:
        wanted = (name or "").strip().lower()
        for field_name, value in self.fields:
            if field_name.lower() == wanted:
                return value.strip()
        return None

    def all_values_of(self, name: str) -> List[str]:
        wanted = (name or "").strip().lower()
        return [value.strip() for field_name, value in self.fields if field_name.lower() == wanted]

    def value_or_empty(self, name: str) -> str:
        return self.value_of(name) or ""

    def raw_lines(self) -> List[str]:
        return list(self.lines)

    @property
    def _start_parts(self) -> List[str]:
        return self.status_line.split(" ", 2) if self.status_line else []

    @property
    def status_code(self) -> Optional[int]:
        parts = self._start_parts
        if len(parts) >= 2 and parts[0].upper().startswith("HTTP/"):
            try:
                return int(parts[1])
            except ValueError:
                return None
        return None

    @property
    def method(self) -> Optional[str]:
        parts = self._start_parts
        if len(parts) >= 2 and not parts[0].upper().startswith("HTTP/"):
            return parts[0].upper()
        return None

    @property
    def path(self) -> Optional[str]:
        parts = self._start_parts
        if len(parts) >= 2 and not parts[0].upper().startswith("HTTP/"):
            return parts[1]
        return None

    def to_text(self) -> str:
        return "\r\n".join([self.status_line] + self.lines) + "\r\n\r\n"

    def __len__(self) -> int:
        return len(self.fields)
