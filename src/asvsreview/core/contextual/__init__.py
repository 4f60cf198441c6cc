"""Context-aware detectors for the high-noise injection and secret rules.

A plain regex for SQL injection, command injection, XSS, hardcoded
credentials or ``eval`` fires on a large amount of harmless code. The
detectors in this package own those rules (``DetectionStrategy.CONTEXTUAL``)
and combine three steps:

1. A *trigger* regex (the rule's catalog pattern) selects candidate lines.
2. A *context window* of ``half_width`` lines on either side is sliced
   around the candidate, clipped at the file boundaries.
3. Heuristic predicates (``is_user_input``, ``is_sanitized``, the named
   credential filters) keep or discard the candidate.

Submodules
----------
- ``heuristics``: context windows, taint-source and mitigation signatures.
- ``credentials``: named rejection filters for credential candidates.
- ``detectors``: the five detector functions.

The detector registry below must cover exactly the catalog's contextual
rule ids; the check runs at import time. Registry order is the order in
which detectors run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence

from asvsreview.core.contextual.credentials import (
    CREDENTIAL_FILTERS,
    DEFAULT_CREDENTIAL_FILTERS,
    CredentialFilter,
    resolve_filters,
)
from asvsreview.core.contextual.detectors import (
    DetectorSettings,
    detect_command_injection,
    detect_dangerous_eval,
    detect_hardcoded_credentials,
    detect_sql_injection,
    detect_xss,
)
from asvsreview.core.contextual.heuristics import context_window, is_sanitized, is_user_input
from asvsreview.core.matcher import is_code_file, split_lines
from asvsreview.core.models import FileRecord, Finding
from asvsreview.core.rules import Rule, contextual_rule_ids
from asvsreview.exceptions import CatalogError

Detector = Callable[[Rule, str, Sequence[str], DetectorSettings], list[Finding]]

DETECTORS: dict[str, Detector] = {
    "V5.1.1": detect_sql_injection,
    "V5.1.2": detect_command_injection,
    "V5.3.1": detect_xss,
    "V2.1.1": detect_hardcoded_credentials,
    "V5.3.3": detect_dangerous_eval,
}

# Half-width of the context window per rule id.
DEFAULT_CONTEXT_WIDTHS: dict[str, int] = {
    "V5.1.1": 10,
    "V5.1.2": 10,
    "V5.3.1": 10,
    "V2.1.1": 5,
    "V5.3.3": 0,
}

if set(DETECTORS) != contextual_rule_ids():
    raise CatalogError(
        "Contextual detector registry does not match the catalog: "
        f"{sorted(set(DETECTORS) ^ contextual_rule_ids())}"
    )


def run_contextual_scan(
    files: Iterable[FileRecord],
    rules: Iterable[Rule],
    context_widths: Mapping[str, int] | None = None,
    credential_filters: Sequence[CredentialFilter] | None = None,
) -> list[Finding]:
    """Run every contextual detector whose rule is in ``rules``.

    Args:
        files: Input files; non-code files are ignored.
        rules: Selected rules; pattern-strategy rules are ignored.
        context_widths: Per-rule half-width overrides, merged over
            ``DEFAULT_CONTEXT_WIDTHS``.
        credential_filters: Enabled credential filters (default: all).

    Returns:
        Findings ordered detector by detector, file by file, line by line.
    """
    widths = {**DEFAULT_CONTEXT_WIDTHS, **(context_widths or {})}
    if credential_filters is None:
        credential_filters = resolve_filters(DEFAULT_CREDENTIAL_FILTERS)
    sources = [
        (record.path, split_lines(record.content))
        for record in files
        if is_code_file(record.path)
    ]

    selected = {rule.id: rule for rule in rules if rule.is_contextual}

    findings: list[Finding] = []
    for rule_id, detector in DETECTORS.items():
        rule = selected.get(rule_id)
        if rule is None:
            continue
        settings = DetectorSettings(
            half_width=widths[rule_id],
            credential_filters=tuple(credential_filters),
        )
        for path, lines in sources:
            findings.extend(detector(rule, path, lines, settings))
    return findings


__all__ = [
    "CREDENTIAL_FILTERS",
    "DEFAULT_CONTEXT_WIDTHS",
    "DEFAULT_CREDENTIAL_FILTERS",
    "DETECTORS",
    "Detector",
    "DetectorSettings",
    "context_window",
    "is_sanitized",
    "is_user_input",
    "resolve_filters",
    "run_contextual_scan",
]
