"""asvs-review CLI -- First-pass security code review against OWASP ASVS.

Entry point for the ``asvs-review`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan   -- Review a directory, zip archive or single file.
    rules  -- List the ASVS rule catalog.

Usage::

    asvs-review scan ./my-project
    asvs-review scan project.zip --level 1 --format markdown -o report.md
    asvs-review scan ./my-project --format json --severity-threshold high
    asvs-review rules --level 2
"""

from __future__ import annotations

import click

from asvsreview import __version__
from asvsreview.cli.rules_cmd import rules_command
from asvsreview.cli.scan import scan_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """asvs-review: Security code review based on OWASP ASVS 4.0.

    Scan source bundles for security anti-patterns and get severity-ranked
    findings mapped to ASVS requirements and the OWASP Top 10.
    """


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(rules_command)
