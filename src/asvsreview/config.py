"""Scan configuration.

``ScanConfig`` holds the knobs callers may turn: the ASVS level that
selects rules, per-detector context-window half-widths, and the enabled
credential filters. It can be built directly or loaded from a YAML file::

    # .asvs-review.yaml
    level: 2
    context_widths:
      V5.1.1: 15
    credential_filters:
      - too_short
      - placeholder
      - environment_read
    strict_manifests: true
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from asvsreview.core.contextual import (
    CREDENTIAL_FILTERS,
    DEFAULT_CONTEXT_WIDTHS,
    DEFAULT_CREDENTIAL_FILTERS,
    CredentialFilter,
    resolve_filters,
)
from asvsreview.core.rules import ASVS_LEVELS
from asvsreview.exceptions import ConfigError

DEFAULT_LEVEL = 3

_KNOWN_KEYS = frozenset({"level", "context_widths", "credential_filters", "strict_manifests"})


@dataclass(frozen=True)
class ScanConfig:
    """Immutable scan settings.

    Attributes:
        level: ASVS level (1-3); rules at or below it are applied.
        context_widths: Half-width overrides keyed by contextual rule id.
        credential_filters: Names of enabled credential filters.
        strict_manifests: Count a shared manifest such as ``package.json``
            toward framework detection only when it names the framework.
    """

    level: int = DEFAULT_LEVEL
    context_widths: Mapping[str, int] = field(default_factory=dict)
    credential_filters: tuple[str, ...] = DEFAULT_CREDENTIAL_FILTERS
    strict_manifests: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.level, bool) or self.level not in ASVS_LEVELS:
            raise ConfigError(f"ASVS level must be one of {ASVS_LEVELS}, got {self.level!r}")
        for rule_id, width in self.context_widths.items():
            if rule_id not in DEFAULT_CONTEXT_WIDTHS:
                raise ConfigError(f"No contextual detector for rule {rule_id!r}")
            if not isinstance(width, int) or isinstance(width, bool) or width < 0:
                raise ConfigError(
                    f"Context width for {rule_id} must be a non-negative integer, got {width!r}"
                )
        resolve_filters(self.credential_filters)

    def context_width(self, rule_id: str) -> int:
        """Return the effective half-width for a contextual rule."""
        return self.context_widths.get(rule_id, DEFAULT_CONTEXT_WIDTHS[rule_id])

    def effective_context_widths(self) -> dict[str, int]:
        return {rule_id: self.context_width(rule_id) for rule_id in DEFAULT_CONTEXT_WIDTHS}

    def enabled_credential_filters(self) -> tuple[CredentialFilter, ...]:
        return resolve_filters(self.credential_filters)


def config_from_mapping(data: Mapping[str, Any]) -> ScanConfig:
    """Build a ``ScanConfig`` from a parsed mapping (e.g. YAML).

    Raises:
        ConfigError: On unknown keys or values of the wrong type.
    """
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    kwargs: dict[str, Any] = {}
    if "level" in data:
        kwargs["level"] = data["level"]

    if "context_widths" in data:
        widths = data["context_widths"]
        if not isinstance(widths, Mapping):
            raise ConfigError("context_widths must be a mapping of rule id to width")
        kwargs["context_widths"] = {str(k): v for k, v in widths.items()}

    if "credential_filters" in data:
        filters = data["credential_filters"]
        if not isinstance(filters, list) or not all(isinstance(f, str) for f in filters):
            known = ", ".join(CREDENTIAL_FILTERS)
            raise ConfigError(f"credential_filters must be a list of names ({known})")
        kwargs["credential_filters"] = tuple(filters)

    if "strict_manifests" in data:
        if not isinstance(data["strict_manifests"], bool):
            raise ConfigError("strict_manifests must be true or false")
        kwargs["strict_manifests"] = data["strict_manifests"]

    return ScanConfig(**kwargs)


def load_config(path: Path) -> ScanConfig:
    """Load a ``ScanConfig`` from a YAML file.

    An empty file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds
            invalid settings.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return ScanConfig()
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return config_from_mapping(data)
