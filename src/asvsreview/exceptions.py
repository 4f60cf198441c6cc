"""asvs-review exception hierarchy.

All public exceptions inherit from AsvsReviewError, giving callers a single
base class to catch when they want to handle any asvs-review failure
without swallowing unrelated errors.
"""


class AsvsReviewError(Exception):
    """Base exception for all asvs-review errors."""


class CatalogError(AsvsReviewError):
    """Raised when the rule catalog is inconsistent.

    Covers duplicate rule ids, levels outside the ASVS 1..3 range, and
    contextual rules without a registered detector. The catalog is static,
    so this always indicates a defect in the package itself.
    """


class ConfigError(AsvsReviewError):
    """Raised for invalid scan configuration.

    Covers unknown ASVS levels, malformed YAML config files, negative
    context widths, and unknown credential filter names.
    """


class IngestError(AsvsReviewError):
    """Raised when an input bundle cannot be loaded as a whole.

    Covers oversized archives, archives with too many entries, and files
    that are not readable zip archives. Failures of individual entries are
    recorded in ``IngestStats.errors`` instead.
    """
