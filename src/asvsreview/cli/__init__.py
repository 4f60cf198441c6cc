"""Command-line interface for asvs-review."""
