"""The five contextual detectors.

Each detector receives its catalog ``Rule`` (whose pattern is the trigger),
one file's lines, and ``DetectorSettings``. It walks the lines, builds a
context window around every trigger line, and keeps or discards the
candidate based on the shared heuristics.

Except for hardcoded credentials, which report every literal on a line, a
detector emits at most one finding per line, using the first trigger match.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from asvsreview.core.contextual.credentials import (
    CredentialCandidate,
    CredentialFilter,
    rejecting_filter,
)
from asvsreview.core.contextual.heuristics import (
    context_window,
    is_sanitized,
    is_user_input,
)
from asvsreview.core.models import Finding
from asvsreview.core.rules import Rule


@dataclass(frozen=True)
class DetectorSettings:
    """Per-detector tuning passed in by the aggregator.

    Attributes:
        half_width: Lines on each side of the trigger line to inspect.
        credential_filters: Enabled filters (credential detector only).
    """

    half_width: int
    credential_filters: tuple[CredentialFilter, ...] = ()


# Variable extraction on the trigger line
_CONCAT_VAR = re.compile(r"\+\s*(\w+)")
_COMMAND_VAR = re.compile(r"\+\s*(\w+)|\$\{(\w+)\}|%s.*%\s*\((\w+)")
_ASSIGNED_VAR = re.compile(r"=\s*(\w+)")

# Dynamic evaluation exclusions
_EVAL_NAME = "ev" + "al"
_EVAL_METHOD_CALL = re.compile(rf"\.\s*{_EVAL_NAME}\s*\(")
_EVAL_NO_ARGS = re.compile(rf"{_EVAL_NAME}\s*\(\s*\)")
_JSON_VOCABULARY = re.compile(r"JSON|parse", re.IGNORECASE)


def _finding(rule: Rule, path: str, index: int, line: str, match: str) -> Finding:
    return Finding(
        rule=rule,
        file=path,
        line=index + 1,
        code=line.strip(),
        match=match.strip(),
    )


def detect_sql_injection(
    rule: Rule,
    path: str,
    lines: Sequence[str],
    settings: DetectorSettings,
) -> list[Finding]:
    """Flag query calls that concatenate user input into a string literal.

    Skipped when the surrounding lines show a prepared statement, a
    placeholder or any sanitizer.
    """
    findings: list[Finding] = []
    for index, line in enumerate(lines):
        trigger = rule.pattern.search(line)
        if trigger is None:
            continue
        context = context_window(lines, index, settings.half_width)
        if is_sanitized(context):
            continue
        concat = _CONCAT_VAR.search(line)
        if concat and is_user_input(context, concat.group(1)):
            findings.append(_finding(rule, path, index, line, trigger.group(0)))
    return findings


def detect_command_injection(
    rule: Rule,
    path: str,
    lines: Sequence[str],
    settings: DetectorSettings,
) -> list[Finding]:
    """Flag process execution whose command embeds user input.

    The variable is taken from ``+ name``, ``${name}`` or ``"%s" % (name``.
    """
    findings: list[Finding] = []
    for index, line in enumerate(lines):
        trigger = rule.pattern.search(line)
        if trigger is None:
            continue
        interpolated = _COMMAND_VAR.search(line)
        if interpolated is None:
            continue
        var_name = next(group for group in interpolated.groups() if group)
        context = context_window(lines, index, settings.half_width)
        if is_user_input(context, var_name) and not is_sanitized(context):
            findings.append(_finding(rule, path, index, line, trigger.group(0)))
    return findings


def detect_xss(
    rule: Rule,
    path: str,
    lines: Sequence[str],
    settings: DetectorSettings,
) -> list[Finding]:
    """Flag direct DOM HTML assignment of user input."""
    findings: list[Finding] = []
    for index, line in enumerate(lines):
        trigger = rule.pattern.search(line)
        if trigger is None:
            continue
        context = context_window(lines, index, settings.half_width)
        if is_sanitized(context):
            continue
        assigned = _ASSIGNED_VAR.search(line)
        if assigned and is_user_input(context, assigned.group(1)):
            findings.append(_finding(rule, path, index, line, trigger.group(0)))
    return findings


def detect_hardcoded_credentials(
    rule: Rule,
    path: str,
    lines: Sequence[str],
    settings: DetectorSettings,
) -> list[Finding]:
    """Flag credential-named variables assigned a literal secret.

    Every literal on a line is a separate candidate; the enabled
    ``credential_filters`` decide which ones survive.
    """
    findings: list[Finding] = []
    for index, line in enumerate(lines):
        for match in rule.pattern.finditer(line):
            candidate = CredentialCandidate(
                name=match.group(1),
                value=match.group(2),
                line=line,
                context=context_window(lines, index, settings.half_width),
            )
            if rejecting_filter(candidate, settings.credential_filters) is not None:
                continue
            findings.append(_finding(rule, path, index, line, match.group(0)))
    return findings


def detect_dangerous_eval(
    rule: Rule,
    path: str,
    lines: Sequence[str],
    settings: DetectorSettings,
) -> list[Finding]:
    """Flag standalone dynamic evaluation calls.

    Method calls such as ``model.eval()``, zero-argument calls, and lines
    that talk about JSON parsing are ignored. Only the trigger line is
    inspected.
    """
    findings: list[Finding] = []
    for index, line in enumerate(lines):
        trigger = rule.pattern.search(line)
        if trigger is None:
            continue
        if _EVAL_METHOD_CALL.search(line):
            continue
        if _EVAL_NO_ARGS.search(line):
            continue
        if _JSON_VOCABULARY.search(line):
            continue
        findings.append(_finding(rule, path, index, line, trigger.group(0)))
    return findings
