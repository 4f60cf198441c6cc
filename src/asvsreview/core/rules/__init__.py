"""ASVS rule catalog.

``RULES`` is the single registry of detection rules. Each entry carries its
ASVS id, category, severity, level, OWASP Top 10 tags and the detection
strategy that owns it:

- ``PATTERN`` rules are matched line by line (``asvsreview.core.matcher``).
- ``CONTEXTUAL`` rules are matched by a detector that also inspects the
  surrounding lines (``asvsreview.core.contextual``).

All public names are re-exported here::

    from asvsreview.core.rules import Rule, Severity, rules_for_level
"""

from asvsreview.core.rules.models import SEVERITY_ORDER, DetectionStrategy, Rule, Severity
from asvsreview.core.rules.catalog import (
    ASVS_LEVELS,
    RULES,
    all_rules,
    categories,
    contextual_rule_ids,
    get_rule,
    rules_by_category,
    rules_for_level,
    validate_catalog,
)

__all__ = [
    "ASVS_LEVELS",
    "DetectionStrategy",
    "RULES",
    "Rule",
    "SEVERITY_ORDER",
    "Severity",
    "all_rules",
    "categories",
    "contextual_rule_ids",
    "get_rule",
    "rules_by_category",
    "rules_for_level",
    "validate_catalog",
]
