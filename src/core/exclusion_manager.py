import threading
from typing import Callable, List, Optional, Tuple

from ..models.exclusion import ExclusionRule, ExclusionRuleType
from ..utils.logger import get_logger
from ..utils.validator import extract_host, extract_path

logger = get_logger("exclusions")

RuleSnapshot = Tuple[ExclusionRule, ...]
ChangeListener = Callable[[RuleSnapshot], None]


class ExclusionRuleStore:
    """Thread-safe exclusion rule list with change notification.

    Rules live in an immutable tuple that writers replace wholesale while
    holding ``_write_lock``; readers take the current tuple without locking,
    so they always see a complete rule set. Listeners run after the swap,
    still under the lock, in registration order, so notifications arrive in
    mutation order.
    """

    def __init__(self, rules: Optional[List[ExclusionRule]] = None):
        self._rules: RuleSnapshot = tuple(rules or ())
        self._listeners: Tuple[ChangeListener, ...] = ()
        self._write_lock = threading.RLock()

    # reads

    def get_rules(self) -> RuleSnapshot:
        return self._rules

    def get_rule(self, rule_id: str) -> Optional[ExclusionRule]:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def should_exclude(self, method: str, url: str) -> bool:
        return any(rule.matches(method, url) for rule in self._rules)

    def matching_rules(self, method: str, url: str) -> List[ExclusionRule]:
        return [rule for rule in self._rules if rule.matches(method, url)]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    # writes

    def add_rule(self, rule: ExclusionRule) -> ExclusionRule:
        with self._write_lock:
            self._rules = self._rules + (rule,)
            logger.info(f"Added exclusion rule {rule}")
            self._notify()
        return rule

    def add(self, rule_type: ExclusionRuleType, pattern: str) -> ExclusionRule:
        return self.add_rule(ExclusionRule.create(rule_type, pattern))

    def remove_rule(self, rule_id: str) -> bool:
        with self._write_lock:
            before = len(self._rules)
            self._rules = tuple(r for r in self._rules if r.id != rule_id)
            removed = len(self._rules) != before
            if removed:
                logger.info(f"Removed exclusion rule {rule_id}")
            else:
                logger.debug(f"No exclusion rule with id {rule_id} to remove")
            self._notify()
        return removed

    def update_rule(self, rule_id: str, rule_type: ExclusionRuleType, pattern: str) -> Optional[ExclusionRule]:
        """Replace type and pattern, keeping the id; unknown ids are ignored."""
        with self._write_lock:
            rules = list(self._rules)
            for index, rule in enumerate(rules):
                if rule.id == rule_id:
                    updated = rule.with_changes(rule_type, pattern)
                    rules[index] = updated
                    break
            else:
                logger.debug(f"No exclusion rule with id {rule_id} to update")
                return None
            self._rules = tuple(rules)
            logger.info(f"Updated exclusion rule {rule_id} -> {updated}")
            self._notify()
        return updated

    def clear_rules(self):
        with self._write_lock:
            self._rules = ()
            logger.info("Cleared all exclusion rules")
            self._notify()

    # listeners

    def add_change_listener(self, listener: ChangeListener):
        with self._write_lock:
            self._listeners = self._listeners + (listener,)

    def remove_change_listener(self, listener: ChangeListener):
        with self._write_lock:
            listeners = list(self._listeners)
            if listener in listeners:
                listeners.remove(listener)
            self._listeners = tuple(listeners)

    def _notify(self):
        # caller holds _write_lock
        snapshot = self._rules
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Exclusion rule listener {listener!r} failed: {e}")


def rule_for_host(url: str) -> Optional[ExclusionRule]:
    host = extract_host(url)
    return ExclusionRule.create(ExclusionRuleType.HOST, host) if host else None


def rule_for_path(url: str) -> Optional[ExclusionRule]:
    path = extract_path(url)
    return ExclusionRule.create(ExclusionRuleType.PATH, path) if path else None


def rule_for_endpoint(method: str, url: str) -> ExclusionRule:
    return ExclusionRule.create(ExclusionRuleType.ENDPOINT, f"{method} {url}")
