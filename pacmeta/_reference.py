"""
Version constraints and package references, and the satisfaction predicate
that decides whether one reference is provided by another.

A reference is the unit that recipe documents use for every dependency class
(`depends`, `provides`, `conflicts`, ...): a name, optionally followed by a
version constraint and, for optional dependencies, a human-readable description.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pacmeta._util import assert_never
from pacmeta._vercmp import VersionComparator, vercmp


class ConstraintOperation(Enum):
    """
    The five comparison operators a version constraint can use.

    Each member's value is the literal that appears in recipe documents.
    """

    GE = ">="
    GT = ">"
    EQ = "="
    LT = "<"
    LE = "<="

    def holds(self, x: int, y: int) -> bool:
        """
        Evaluate `x <op> y` on integer positions.
        """
        if self is ConstraintOperation.EQ:
            return x == y
        elif self is ConstraintOperation.GE:
            return x >= y
        elif self is ConstraintOperation.LE:
            return x <= y
        elif self is ConstraintOperation.GT:
            return x > y
        elif self is ConstraintOperation.LT:
            return x < y
        else:
            assert_never(self)  # pragma: no cover

    def __str__(self) -> str:
        return self.value


# Two-character operators must be tried before their one-character prefixes.
_OPERATORS: tuple[tuple[str, ConstraintOperation], ...] = (
    (">=", ConstraintOperation.GE),
    ("<=", ConstraintOperation.LE),
    (">", ConstraintOperation.GT),
    ("<", ConstraintOperation.LT),
    ("=", ConstraintOperation.EQ),
)

_CONSTRAINT_PATTERN = re.compile(r"([^<>=]*?)[ \t]*(>=|<=|=|>|<)[ \t]*(\S*)")

_DESCRIPTION_SEPARATOR = ": "

# Candidate versions, expressed as positions on the line through both
# constraint versions: below both, at the lower one, between, at the higher
# one, above both.
_PROBES = (2, 1, 0, -1, -2)


def parse_operation(literal: str) -> ConstraintOperation | None:
    """
    Map an operator literal to its `ConstraintOperation`, or `None` if the
    literal is not an operator.
    """
    for text, operation in _OPERATORS:
        if literal == text:
            return operation
    return None


@dataclass(frozen=True)
class VersionConstraint:
    """
    An operator and an opaque version string, e.g. `>=1.2-1`.
    """

    operation: ConstraintOperation
    version: str

    def __str__(self) -> str:
        return f"{self.operation}{self.version}"


@dataclass(frozen=True)
class PackageReference:
    """
    A named capability, as mentioned by a dependency, provision, conflict or
    replacement.

    A reference without a constraint matches any version of `name`.
    """

    name: str
    """
    The capability name, e.g. `sh` or `libfoo.so`.
    """

    description: str | None = None
    """
    The free-text description following `": "`, used by optional dependencies.
    """

    constraint: VersionConstraint | None = None
    """
    The version constraint, if any.
    """

    @classmethod
    def parse(cls, token: str) -> PackageReference:
        """
        Parse a single reference token such as `foo>=1.2` or `foo: does a thing`.

        The returned reference may have an empty name; callers are expected to
        discard those.
        """
        description: str | None = None
        index = token.find(_DESCRIPTION_SEPARATOR)
        if index >= 0:
            description = token[index + len(_DESCRIPTION_SEPARATOR) :]
            token = token[:index]

        match = _CONSTRAINT_PATTERN.match(token)
        if match is None:
            return cls(name=token, description=description)

        name, literal, version = match.groups()
        operation = parse_operation(literal)
        if operation is None:  # pragma: no cover
            return cls(name=name, description=description)
        return cls(
            name=name,
            description=description,
            constraint=VersionConstraint(operation, version),
        )

    def is_provided_by(self, by: PackageReference, compare: VersionComparator = vercmp) -> bool:
        """
        See `is_provided_by`.
        """
        return is_provided_by(self, by, compare)

    def __str__(self) -> str:
        """
        Render the name and constraint. The description is not rendered.
        """
        if self.constraint is None:
            return self.name
        return f"{self.name}{self.constraint}"


def constraints_compatible(
    left: ConstraintOperation, right: ConstraintOperation, cmp: int
) -> bool:
    """
    Decide whether some version can satisfy both `<left> V1` and `<right> V2`.

    `cmp` is the three-way comparison of `V1` against `V2`. The two versions are
    placed on an integer line according to `cmp`, and a handful of probe
    positions around them are tested against both operators. Each operator
    splits the line at a single point, so any non-empty intersection contains
    one of the probes.
    """
    if cmp > 0:
        x1, x2 = 1, -1
    elif cmp < 0:
        x1, x2 = -1, 1
    else:
        x1, x2 = 0, 0

    return any(left.holds(p, x1) and right.holds(p, x2) for p in _PROBES)


def is_provided_by(
    reference: PackageReference, by: PackageReference, compare: VersionComparator = vercmp
) -> bool:
    """
    Returns whether `reference` is satisfied by `by`.

    Names must match exactly. If either side is unconstrained the answer is
    `True`; otherwise the two constraints must be compatible under `compare`.
    """
    if reference.name != by.name:
        return False
    if reference.constraint is None or by.constraint is None:
        return True

    cmp = compare(reference.constraint.version, by.constraint.version)
    return constraints_compatible(reference.constraint.operation, by.constraint.operation, cmp)
