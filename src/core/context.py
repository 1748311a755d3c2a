from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Optional

from config.constants import CONTEXT_KEYS


class EvaluationContext(MutableMapping):
    """Scratch space shared by the checks of a single evaluation pass.

    Create one per analysed response and discard it afterwards.
    """

    ORIGIN_KEY = CONTEXT_KEYS['request_origin']

    def __init__(self, request_origin: Optional[str] = None, **initial: Any):
        self._data: Dict[str, Any] = dict(initial)
        if request_origin is not None:
            self._data[self.ORIGIN_KEY] = request_origin

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any):
        self._data[key] = value

    def __delitem__(self, key: str):
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def request_origin(self) -> Optional[str]:
        return self._data.get(self.ORIGIN_KEY)

    @property
    def csp(self) -> Optional[str]:
        return self._data.get(CONTEXT_KEYS['csp'])

    @property
    def cookies(self):
        return self._data.get(CONTEXT_KEYS['cookies'])

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"EvaluationContext({self._data!r})"
