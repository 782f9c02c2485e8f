"""Release selection using npm-style semantic version ranges."""

from __future__ import annotations

import logging
import re
from typing import List, Sequence

import semantic_version

from errors import InvalidConstraint, NoMatch
from .models import ReleaseDescriptor, VersionConstraint

logger = logging.getLogger(__name__)

_OPERATOR_SPACING = re.compile(r"(<=|>=|=<|=>|<|>|=|\^|~>?)\s+")
_OPERATOR_ALIASES = (
    (re.compile(r"(?<![<>=])=>"), ">="),
    (re.compile(r"(?<![<>=])=<"), "<="),
    (re.compile(r"~>"), "~"),
)


def _normalize_spec(raw: str) -> str:
    """Attach operators to their versions and map ``=>``, ``=<``, ``~>`` to npm spellings."""
    s = _OPERATOR_SPACING.sub(r"\1", raw)
    for pattern, replacement in _OPERATOR_ALIASES:
        s = pattern.sub(replacement, s)
    return s


def parse_constraint(expr: str) -> VersionConstraint:
    """Parse a version-range expression.

    NpmSpec understands ``^``, ``~``, hyphen ranges, x-ranges and ``||``;
    comma-separated comparator lists (``>=1.2, <3.0``) fall back to SimpleSpec.
    Whitespace between an operator and its version (``>= 14``) is accepted,
    as are the ``=>``, ``=<`` and ``~>`` operator spellings.

    Raises:
        InvalidConstraint: If the expression is blank or neither grammar accepts it.
    """
    raw = (expr or "").strip()
    if not raw:
        raise InvalidConstraint("Invalid semver constraint: empty expression")
    norm = _normalize_spec(raw)
    try:
        return VersionConstraint(raw=raw, spec=semantic_version.NpmSpec(norm))
    except ValueError:
        pass
    try:
        simple = re.sub(r"\s*,\s*", ",", norm)
        return VersionConstraint(raw=raw, spec=semantic_version.SimpleSpec(simple))
    except ValueError as e:
        raise InvalidConstraint(f"Invalid semver constraint '{raw}': {e}") from e


def resolve(candidates: Sequence[ReleaseDescriptor], constraint_expr: str) -> ReleaseDescriptor:
    """Pick the highest candidate whose version satisfies ``constraint_expr``.

    Among candidates sharing the winning version, the first in input order is
    returned.

    Raises:
        InvalidConstraint: If the expression cannot be parsed.
        NoMatch: If no candidate satisfies it.
    """
    constraint = parse_constraint(constraint_expr)

    matching: List[ReleaseDescriptor] = [
        rel for rel in candidates if constraint.match(rel.version)
    ]
    logger.debug(
        "%d of %d candidate(s) satisfy '%s'",
        len(matching),
        len(candidates),
        constraint.raw,
    )
    if not matching:
        raise NoMatch()

    # sort() is stable with reverse=True, so ties keep input order
    matching.sort(key=lambda rel: rel.version, reverse=True)
    return matching[0]
