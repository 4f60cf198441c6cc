"""``asvs-review rules`` -- List the ASVS rule catalog.

Prints each rule's id, severity, ASVS level, category, title and detection
strategy. Useful for checking which rules a given ``--level`` applies.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import json

import click

from asvsreview.core.rules import Rule, all_rules, rules_for_level


def _rule_to_json(rule: Rule) -> dict:
    return {
        "id": rule.id,
        "category": rule.category,
        "title": rule.title,
        "description": rule.description,
        "severity": rule.severity.label,
        "level": rule.level,
        "standard_tags": list(rule.standard_tags),
        "strategy": rule.strategy.value,
        "pattern": rule.pattern.pattern,
    }


@click.command("rules")
@click.option(
    "--level",
    type=click.IntRange(1, 3),
    default=None,
    help="Only rules required at this ASVS level (1-3).",
)
@click.option("--category", default=None, help="Only rules in this category.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def rules_command(level: int | None, category: str | None, output_format: str) -> None:
    """List the ASVS detection rules."""
    rules = list(all_rules()) if level is None else rules_for_level(level)
    if category is not None:
        rules = [rule for rule in rules if rule.category.lower() == category.lower()]

    if output_format == "json":
        click.echo(json.dumps([_rule_to_json(rule) for rule in rules], indent=2))
    else:
        from asvsreview.cli.output import print_rules
        print_rules(rules)
