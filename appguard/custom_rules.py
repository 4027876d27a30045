"""User-defined regex rules evaluated against page content."""

import logging
import re
from pathlib import Path
from typing import Optional

import yaml

from .errors import RulePatternError
from .models import CustomRule, Finding

logger = logging.getLogger(__name__)


def compile_rule(rule: CustomRule) -> tuple[Optional[re.Pattern], Optional[RulePatternError]]:
    """Compile a rule pattern case-insensitively. Errors are returned, not raised."""
    try:
        return re.compile(rule.pattern, re.IGNORECASE), None
    except (re.error, TypeError) as e:
        return None, RulePatternError(rule.id, str(e))


class CustomRuleEvaluator:
    """Applies enabled custom rules to pages; compiles each pattern once."""

    def __init__(self, rules):
        self.compiled: list[tuple[CustomRule, re.Pattern]] = []
        self.errors: list[RulePatternError] = []
        for rule in rules:
            if not rule.enabled:
                continue
            pattern, error = compile_rule(rule)
            if error is not None:
                logger.warning("Skipping custom rule %r: %s", rule.name, error.message)
                self.errors.append(error)
                continue
            self.compiled.append((rule, pattern))

    def evaluate(self, url: str, content: str) -> list[Finding]:
        findings = []
        for rule, pattern in self.compiled:
            if pattern.search(content):
                findings.append(Finding(
                    name=rule.name,
                    description=rule.description,
                    url=url,
                    severity=rule.severity,
                    category=rule.category,
                    details={"rule": rule.id, "matched": True},
                ))
        return findings


def load_rules(path: str | Path) -> list[CustomRule]:
    """Load a YAML list of rule mappings (id, name, description, category, pattern, severity, enabled)."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("rules", [])
    return [CustomRule.from_dict(item) for item in data]
