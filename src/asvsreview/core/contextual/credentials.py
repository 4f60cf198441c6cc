"""Named rejection filters for hardcoded-credential candidates.

A candidate is a ``name = "literal"`` assignment found by the credential
trigger. Each filter is a named predicate; a candidate is dropped as soon as
one enabled filter rejects it. Keeping the filters named lets callers turn
individual heuristics off through configuration (``credential_filters``)
without touching the detector.

The filters are deliberately coarse and may over- or under-suppress:

- ``path_or_url``: the literal contains ``.`` or ``/``.
- ``namespaced_key``: the literal starts with ``auth`` or ``api``
  (config keys and route names such as ``"auth.password"``).
- ``too_short``: the literal is shorter than six characters.
- ``placeholder``: the literal contains test/example/demo markers or
  template syntax (``<``, ``>``, ``{``, ``$``).
- ``environment_read``: the surrounding lines read the environment.
- ``constant_declaration``: the line starts with a capitalized identifier,
  as enum members and constant tables do.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from asvsreview.exceptions import ConfigError

MIN_SECRET_LENGTH = 6

_PLACEHOLDER = re.compile(r"test|example|demo|placeholder|xxx|your_|<|>|\{|\$")
_ENVIRONMENT_READ = re.compile(r"process\.env|os\.getenv|ENV\[", re.IGNORECASE)
_CONSTANT_DECLARATION = re.compile(r"^[A-Z][a-zA-Z0-9_]*\s*=")


@dataclass(frozen=True)
class CredentialCandidate:
    """A credential-looking assignment awaiting the filters.

    Attributes:
        name: The credential-like identifier (``password``, ``api_key`` ...).
        value: The quoted literal, without quotes.
        line: The raw source line.
        context: The context window around the line.
    """

    name: str
    value: str
    line: str
    context: str


@dataclass(frozen=True)
class CredentialFilter:
    """A named predicate that returns True when a candidate should be dropped."""

    name: str
    description: str
    rejects: Callable[[CredentialCandidate], bool]


def _path_or_url(candidate: CredentialCandidate) -> bool:
    return "." in candidate.value or "/" in candidate.value


def _namespaced_key(candidate: CredentialCandidate) -> bool:
    return candidate.value.startswith(("auth", "api"))


def _too_short(candidate: CredentialCandidate) -> bool:
    return len(candidate.value) < MIN_SECRET_LENGTH


def _placeholder(candidate: CredentialCandidate) -> bool:
    return bool(_PLACEHOLDER.search(candidate.value.lower()))


def _environment_read(candidate: CredentialCandidate) -> bool:
    return bool(_ENVIRONMENT_READ.search(candidate.context))


def _constant_declaration(candidate: CredentialCandidate) -> bool:
    return bool(_CONSTANT_DECLARATION.match(candidate.line))


CREDENTIAL_FILTERS: dict[str, CredentialFilter] = {
    f.name: f
    for f in (
        CredentialFilter("path_or_url", "Literal looks like a path, URL or dotted key", _path_or_url),
        CredentialFilter("namespaced_key", "Literal starts with an auth/api namespace", _namespaced_key),
        CredentialFilter("too_short", f"Literal shorter than {MIN_SECRET_LENGTH} characters", _too_short),
        CredentialFilter("placeholder", "Literal is a placeholder or template", _placeholder),
        CredentialFilter("environment_read", "Nearby code reads the environment", _environment_read),
        CredentialFilter("constant_declaration", "Line declares a capitalized constant", _constant_declaration),
    )
}

DEFAULT_CREDENTIAL_FILTERS: tuple[str, ...] = tuple(CREDENTIAL_FILTERS)


def resolve_filters(names: Iterable[str]) -> tuple[CredentialFilter, ...]:
    """Look up filters by name, preserving the given order.

    Raises:
        ConfigError: If a name is not a known filter.
    """
    resolved: list[CredentialFilter] = []
    for name in names:
        try:
            resolved.append(CREDENTIAL_FILTERS[name])
        except KeyError:
            known = ", ".join(CREDENTIAL_FILTERS)
            raise ConfigError(
                f"Unknown credential filter {name!r} (known: {known})"
            ) from None
    return tuple(resolved)


def rejecting_filter(
    candidate: CredentialCandidate,
    filters: Sequence[CredentialFilter],
) -> str | None:
    """Return the name of the first filter rejecting ``candidate``, if any."""
    for f in filters:
        if f.rejects(candidate):
            return f.name
    return None
