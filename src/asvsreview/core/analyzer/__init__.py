"""Aggregation of the two detection passes into an ``AnalysisResult``.

Submodules
----------
- ``engine``: The CodeAnalyzer class and result helpers.
- ``languages``: Extension-to-language mapping and line statistics.
- ``frameworks``: Framework detection from config files and signatures.

All public names are re-exported here::

    from asvsreview.core.analyzer import CodeAnalyzer, filter_by_severity
"""

from asvsreview.core.analyzer.engine import (
    CodeAnalyzer,
    analyze_files,
    count_findings,
    filter_by_severity,
    sort_findings,
)
from asvsreview.core.analyzer.frameworks import FRAMEWORK_SIGNATURES, detect_frameworks
from asvsreview.core.analyzer.languages import LANGUAGE_MAP, compute_language_stats, language_for

__all__ = [
    "CodeAnalyzer",
    "FRAMEWORK_SIGNATURES",
    "LANGUAGE_MAP",
    "analyze_files",
    "compute_language_stats",
    "count_findings",
    "detect_frameworks",
    "filter_by_severity",
    "language_for",
    "sort_findings",
]
