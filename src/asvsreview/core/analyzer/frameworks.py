"""Framework and library detection.

Each ``FrameworkSignature`` lists distinctive config filenames, shared
manifest filenames and content signatures. Confidence is assigned as:

- **high**: one of the framework's config files or manifests is present
  (``angular.json``, ``manage.py``, ``package.json`` ...).
- **medium**: no config hit, but a signature matches somewhere in the
  bundle and the framework has alternative signatures.
- **low**: as medium, but the framework has a single signature.

With ``strict_manifests`` a shared manifest (``package.json``,
``composer.json``, ``pom.xml``, ``build.gradle``) only counts when it
mentions the framework. One ``package.json`` is present in nearly every
JavaScript project, so by default it reports React, Vue.js, Angular, Svelte
and Express together.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath

from asvsreview.core.models import FileRecord, FrameworkInfo

_CONFIDENCE_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}


@dataclass(frozen=True)
class FrameworkSignature:
    """Detection data for one framework.

    Attributes:
        name: Display name.
        patterns: Content signatures; the first hit decides.
        config_files: Basenames that alone identify the framework.
        manifests: Basenames of shared dependency manifests. They count like
            ``config_files`` unless ``strict_manifests`` is set.
    """

    name: str
    patterns: tuple[re.Pattern[str], ...]
    config_files: tuple[str, ...] = ()
    manifests: tuple[str, ...] = ()


def _sig(
    name: str,
    patterns: Sequence[str],
    config_files: Sequence[str] = (),
    manifests: Sequence[str] = (),
) -> FrameworkSignature:
    return FrameworkSignature(
        name=name,
        patterns=tuple(re.compile(p) for p in patterns),
        config_files=tuple(config_files),
        manifests=tuple(manifests),
    )


FRAMEWORK_SIGNATURES: tuple[FrameworkSignature, ...] = (
    _sig("React", [r'"react":'], manifests=["package.json"]),
    _sig("Next.js", [r'"next":'],
         config_files=["next.config.js", "next.config.mjs", "next.config.ts"]),
    _sig("Vue.js", [r'"vue":'], manifests=["package.json"]),
    _sig("Angular", [r'"@angular/core":'],
         config_files=["angular.json"], manifests=["package.json"]),
    _sig("Svelte", [r'"svelte":'], manifests=["package.json"]),
    _sig("Django", [r"django", r"DJANGO_SETTINGS_MODULE"],
         config_files=["manage.py", "settings.py"]),
    _sig("Flask", [r"from flask import", r"Flask\(__name__\)"]),
    _sig("Express",
         [r'"express":', r"""require\(['"]express['"]\)""", r"""from ['"]express['"]"""],
         manifests=["package.json"]),
    _sig("Spring", [r"org\.springframework", r"@SpringBootApplication"],
         manifests=["pom.xml", "build.gradle"]),
    _sig("Laravel", [r'"laravel/framework":'],
         config_files=["artisan"], manifests=["composer.json"]),
    _sig("Ruby on Rails", [r"""gem ['"]rails['"]""", r"Rails\.application"],
         config_files=["Gemfile"]),
    _sig("ASP.NET", [r"using System\.Web", r"using Microsoft\.AspNetCore"]),
    _sig("FastAPI", [r"from fastapi import", r"FastAPI\("]),
    _sig("Tailwind CSS", [r'"tailwindcss":'],
         config_files=["tailwind.config.js", "tailwind.config.ts"]),
    _sig("Bootstrap", [r'"bootstrap":', r"<link.*bootstrap"]),
)


def _basename(path: str) -> str:
    return PurePosixPath(path).name


def _confidence(
    signature: FrameworkSignature,
    by_name: dict[str, list[FileRecord]],
    all_content: str,
    strict_manifests: bool,
) -> str | None:
    if any(name in by_name for name in signature.config_files):
        return "high"

    for manifest in signature.manifests:
        for record in by_name.get(manifest, ()):
            if not strict_manifests or any(p.search(record.content) for p in signature.patterns):
                return "high"

    for pattern in signature.patterns:
        if pattern.search(all_content):
            return "medium" if len(signature.patterns) > 1 else "low"
    return None


def detect_frameworks(
    files: Sequence[FileRecord],
    signatures: Sequence[FrameworkSignature] = FRAMEWORK_SIGNATURES,
    strict_manifests: bool = False,
) -> list[FrameworkInfo]:
    """Detect frameworks used by a bundle of files.

    All files are considered, including non-code files such as
    ``Gemfile`` or ``artisan``.

    Args:
        files: Every input record.
        signatures: Framework table to match against.
        strict_manifests: Count a shared manifest only when it contains one
            of the framework's signatures.

    Returns:
        Detected frameworks, most confident first, ties in signature order.
    """
    by_name: dict[str, list[FileRecord]] = {}
    for record in files:
        by_name.setdefault(_basename(record.path), []).append(record)
    all_content = "\n".join(record.content for record in files)

    detected: list[FrameworkInfo] = []
    for signature in signatures:
        confidence = _confidence(signature, by_name, all_content, strict_manifests)
        if confidence is not None:
            detected.append(FrameworkInfo(name=signature.name, confidence=confidence))

    detected.sort(key=lambda fw: _CONFIDENCE_ORDER[fw.confidence])
    return detected
