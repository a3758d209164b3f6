"""
Package records produced by `pacmeta`.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

from pacmeta._reference import ConstraintOperation, PackageReference, VersionConstraint


@dataclass(frozen=True)
class RpcPackageInfo:
    """
    Popularity and ownership information for a single package, as reported by
    the package index's RPC interface.
    """

    repo: str
    base: str
    name: str
    version: str
    description: str | None = None
    maintainer: str | None = None

    first_submitted: int | None = None
    """
    Submission time as a UNIX timestamp.
    """

    last_modified: int | None = None
    """
    Last modification time as a UNIX timestamp.
    """

    votes: int = 0
    popularity: float = 0.0

    def to_reference(self) -> PackageReference:
        """
        A reference pinned to this package's exact version (`name=version`).
        """
        return PackageReference(
            name=self.name, constraint=VersionConstraint(ConstraintOperation.EQ, self.version)
        )


@dataclass(frozen=True)
class PackageInfo(RpcPackageInfo):
    """
    A fully resolved package produced by a recipe document.

    `make_depends` never repeats anything already implied by `depends`, and
    `check_depends` never repeats anything implied by either of them.
    """

    base_index: int = 0
    """
    The position of this package among the packages its base declares.
    """

    base_count: int = 1
    """
    The number of packages its base declares.
    """

    archs: tuple[str, ...] = ()
    url: str | None = None
    licenses: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    pgp_keys: tuple[str, ...] = ()

    depends: tuple[PackageReference, ...] = ()
    make_depends: tuple[PackageReference, ...] = ()
    check_depends: tuple[PackageReference, ...] = ()
    optional: tuple[PackageReference, ...] = ()
    provides: tuple[PackageReference, ...] = ()
    conflicts: tuple[PackageReference, ...] = ()
    replaces: tuple[PackageReference, ...] = ()

    git_url: str = ""
    git_branch: str | None = None
    git_commit: str | None = None
    git_path: str | None = None


def all_depends(info: PackageInfo) -> tuple[PackageReference, ...]:
    """
    Every build-time and run-time dependency of `info`, in declaration order.
    """
    return info.depends + info.make_depends + info.check_depends


def repo_path(tmp_root: str, base: str) -> str:
    """
    The directory a package base's repository is cloned into under `tmp_root`.
    """
    return posixpath.join(tmp_root, base)


def build_path(repo_path: str, git_path: str | None) -> str:
    """
    The directory holding the recipe inside a cloned repository.
    """
    if git_path is None:
        return repo_path
    return posixpath.join(repo_path, git_path)
