"""Tests for the ASVS rule catalog and its lookups.

Verifies:
    - The catalog holds the expected 23 rules with unique ids.
    - Severity ordering and parsing.
    - Level selection is monotonic and rejects invalid levels.
    - Category lookups and first-appearance ordering.
    - Contextual ownership matches the detector registry.
    - Catalog validation rejects malformed tables.
"""

from __future__ import annotations

import re
from dataclasses import replace

import pytest

from asvsreview.core.contextual import DETECTORS
from asvsreview.core.rules import (
    RULES,
    SEVERITY_ORDER,
    DetectionStrategy,
    Severity,
    all_rules,
    categories,
    contextual_rule_ids,
    get_rule,
    rules_by_category,
    rules_for_level,
    validate_catalog,
)
from asvsreview.exceptions import CatalogError, ConfigError


class TestSeverity:
    """Tests for the Severity scale."""

    def test_ordering(self) -> None:
        assert Severity.LOW < Severity.MEDIUM < Severity.HIGH < Severity.CRITICAL

    def test_rank_is_zero_for_critical(self) -> None:
        assert Severity.CRITICAL.rank == 0
        assert Severity.HIGH.rank == 1
        assert Severity.MEDIUM.rank == 2
        assert Severity.LOW.rank == 3

    def test_severity_order_is_critical_first(self) -> None:
        assert SEVERITY_ORDER == (
            Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW,
        )

    def test_from_label_is_case_insensitive(self) -> None:
        assert Severity.from_label("High") is Severity.HIGH
        assert Severity.from_label(" critical ") is Severity.CRITICAL

    def test_from_label_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown severity"):
            Severity.from_label("severe")

    def test_label(self) -> None:
        assert Severity.MEDIUM.label == "medium"


class TestCatalogContents:
    """The catalog content itself."""

    def test_rule_count(self) -> None:
        assert len(all_rules()) == 23

    def test_ids_are_unique(self) -> None:
        ids = [rule.id for rule in RULES]
        assert len(ids) == len(set(ids))

    @pytest.mark.parametrize(
        "rule_id, category, severity, level",
        [
            ("V2.1.1", "Authentication", Severity.CRITICAL, 1),
            ("V5.1.1", "Input Validation", Severity.CRITICAL, 1),
            ("V5.3.1", "Input Validation", Severity.HIGH, 1),
            ("V6.2.3", "Cryptography", Severity.MEDIUM, 2),
            ("V7.4.2", "Error Handling", Severity.MEDIUM, 2),
            ("V13.1.1", "API Security", Severity.MEDIUM, 2),
            ("V14.2.1", "Configuration", Severity.HIGH, 1),
        ],
    )
    def test_rule_metadata(
        self, rule_id: str, category: str, severity: Severity, level: int
    ) -> None:
        rule = get_rule(rule_id)
        assert rule.category == category
        assert rule.severity is severity
        assert rule.level == level

    def test_every_rule_has_owasp_tag(self) -> None:
        for rule in RULES:
            assert rule.standard_tags
            assert all(tag.startswith("A0") for tag in rule.standard_tags)

    def test_patterns_are_compiled_case_insensitive(self) -> None:
        for rule in RULES:
            assert isinstance(rule.pattern, re.Pattern)
            assert rule.pattern.flags & re.IGNORECASE

    def test_no_level_three_only_rules(self) -> None:
        assert rules_for_level(3) == list(RULES)


class TestLookups:
    """Tests for get_rule, rules_by_category and categories."""

    def test_get_rule_unknown_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            get_rule("V99.9.9")

    def test_rules_by_category_exact_match(self) -> None:
        ids = [rule.id for rule in rules_by_category("Session Management")]
        assert ids == ["V3.2.1", "V3.3.1"]

    def test_rules_by_category_is_case_sensitive(self) -> None:
        assert rules_by_category("session management") == []

    def test_categories_in_first_appearance_order(self) -> None:
        assert categories() == [
            "Authentication",
            "Session Management",
            "Input Validation",
            "Cryptography",
            "Error Handling",
            "Data Protection",
            "Communications",
            "Malicious Code",
            "Files and Resources",
            "API Security",
            "Configuration",
        ]


class TestLevelSelection:
    """Tests for rules_for_level."""

    def test_level_one_excludes_level_two_rules(self) -> None:
        ids = {rule.id for rule in rules_for_level(1)}
        assert "V6.2.3" not in ids
        assert "V7.4.1" not in ids
        assert "V5.1.1" in ids
        assert len(ids) == 19

    def test_levels_are_monotonic(self) -> None:
        one = {rule.id for rule in rules_for_level(1)}
        two = {rule.id for rule in rules_for_level(2)}
        three = {rule.id for rule in rules_for_level(3)}
        assert one <= two <= three

    @pytest.mark.parametrize("level", [0, 4, -1])
    def test_invalid_level_raises(self, level: int) -> None:
        with pytest.raises(ConfigError):
            rules_for_level(level)


class TestContextualOwnership:
    """Contextual rules and the detector registry agree."""

    def test_contextual_ids(self) -> None:
        assert contextual_rule_ids() == frozenset(
            {"V2.1.1", "V5.1.1", "V5.1.2", "V5.3.1", "V5.3.3"}
        )

    def test_registry_covers_contextual_ids(self) -> None:
        assert set(DETECTORS) == contextual_rule_ids()

    def test_contextual_ids_of_subset(self) -> None:
        subset = [get_rule("V2.1.1"), get_rule("V9.1.1")]
        assert contextual_rule_ids(subset) == frozenset({"V2.1.1"})

    def test_strategy_flag(self) -> None:
        assert get_rule("V5.1.1").strategy is DetectionStrategy.CONTEXTUAL
        assert get_rule("V5.1.1").is_contextual
        assert get_rule("V9.1.1").strategy is DetectionStrategy.PATTERN
        assert not get_rule("V9.1.1").is_contextual


class TestValidateCatalog:
    """Tests for validate_catalog."""

    def test_shipped_catalog_is_valid(self) -> None:
        validate_catalog(RULES)

    def test_duplicate_id_rejected(self) -> None:
        rule = get_rule("V9.1.1")
        with pytest.raises(CatalogError, match="Duplicate"):
            validate_catalog([rule, rule])

    def test_invalid_level_rejected(self) -> None:
        broken = replace(get_rule("V9.1.1"), level=4)
        with pytest.raises(CatalogError, match="level"):
            validate_catalog([broken])

    def test_invalid_severity_rejected(self) -> None:
        broken = replace(get_rule("V9.1.1"), severity="urgent")
        with pytest.raises(CatalogError, match="severity"):
            validate_catalog([broken])

    def test_catalog_error_is_asvs_review_error(self) -> None:
        from asvsreview.exceptions import AsvsReviewError
        assert issubclass(CatalogError, AsvsReviewError)
