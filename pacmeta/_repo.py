"""
Mapping of distribution repositories to the source-control locations that host
their recipe documents.
"""

from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

_OS_RELEASE_PATHS = (Path("/etc/os-release"), Path("/usr/lib/os-release"))

_DEFAULT_OS_ID = "arch"

_OS_ID_ENV = "PACMETA_OS_ID"


class RepoRegistryError(Exception):
    """
    Raised when a `RepoRegistry` is constructed from an ambiguous table, i.e.
    one where some `(os, repo)` pair matches more than one entry.
    """

    pass


@dataclass(frozen=True)
class GitRepo:
    """
    A location inside a git repository.

    In registry entries, every field is a template that may contain the
    `${REPO}`, `${BASE}` and `${ARCH}` placeholders.
    """

    url: str
    branch: str
    path: str

    def substitute(self, repo: str, base: str, arch: str) -> GitRepo:
        """
        Returns a copy with every placeholder replaced in all three fields.
        """

        def _replace(template: str) -> str:
            return (
                template.replace("${REPO}", repo).replace("${BASE}", base).replace("${ARCH}", arch)
            )

        return GitRepo(
            url=_replace(self.url), branch=_replace(self.branch), path=_replace(self.path)
        )


@dataclass(frozen=True)
class PackageRepo:
    """
    A single registry entry: the operating systems and repositories it applies
    to, and the templated location of their recipes.
    """

    os: frozenset[str]
    repo: frozenset[str]
    git: GitRepo

    def matches(self, os_id: str, repo: str) -> bool:
        """
        Returns whether this entry applies to `repo` on `os_id`.
        """
        return os_id in self.os and repo in self.repo


def ambiguous_pairs(entries: Iterable[PackageRepo]) -> list[tuple[str, str]]:
    """
    Returns every `(os, repo)` pair, drawn from the values appearing anywhere in
    `entries`, that matches two or more entries. An empty result means the
    table is unambiguous.
    """
    entries = list(entries)
    os_ids = sorted({os_id for entry in entries for os_id in entry.os})
    repos = sorted({repo for entry in entries for repo in entry.repo})

    return [
        (os_id, repo)
        for os_id in os_ids
        for repo in repos
        if sum(1 for entry in entries if entry.matches(os_id, repo)) >= 2
    ]


def _read_os_id(paths: Sequence[Path] = _OS_RELEASE_PATHS) -> str | None:
    for path in paths:
        try:
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError:
            continue

        for line in lines:
            if line.startswith("ID="):
                return line[len("ID=") :].strip().strip("\"'")
    return None


@functools.lru_cache(maxsize=None)
def detect_os_id() -> str:
    """
    The identifier of the running operating system.

    `PACMETA_OS_ID` takes precedence when set. Otherwise the `ID` field of the
    system's os-release file is used, falling back to `arch` when it cannot be
    read. The result is computed once per process.
    """
    override = os.environ.get(_OS_ID_ENV)
    if override:
        return override

    detected = _read_os_id()
    if detected is None:
        logger.warning(f"could not determine the OS identifier, assuming {_DEFAULT_OS_ID!r}")
        return _DEFAULT_OS_ID
    return detected


class RepoRegistry:
    """
    An ordered, read-only table of `PackageRepo` entries.

    The table is validated on construction, so a registry that exists is
    guaranteed to resolve any `(os, repo)` pair to at most one location.
    """

    def __init__(self, entries: Iterable[PackageRepo]) -> None:
        """
        Create a new `RepoRegistry`.

        Raises `RepoRegistryError` if any `(os, repo)` pair is ambiguous.
        """
        self._entries = tuple(entries)

        ambiguous = ambiguous_pairs(self._entries)
        if ambiguous:
            names = ", ".join(f"{os_id}:{repo}" for os_id, repo in ambiguous)
            raise RepoRegistryError(f"only a single matching repo is allowed: {names}")

    @property
    def entries(self) -> tuple[PackageRepo, ...]:
        """
        The registry entries, in lookup order.
        """
        return self._entries

    def find(self, repo: str, base: str, arch: str, os_id: str | None = None) -> GitRepo | None:
        """
        Returns the location of `base`'s recipe in `repo` for `arch`, or `None`
        if no entry covers the operating system and repository.

        `os_id` defaults to the detected operating system.
        """
        if os_id is None:
            os_id = detect_os_id()

        for entry in self._entries:
            if entry.matches(os_id, repo):
                return entry.git.substitute(repo, base, arch)

        logger.debug(f"no git location for {repo}/{base} on {os_id}")
        return None


DEFAULT_REGISTRY = RepoRegistry(
    [
        PackageRepo(
            os=frozenset({"arch"}),
            repo=frozenset({"core", "extra", "testing"}),
            git=GitRepo(
                url="https://git.archlinux.org/svntogit/packages.git",
                branch="packages/${BASE}",
                path="repos/${REPO}-${ARCH}",
            ),
        ),
        PackageRepo(
            os=frozenset({"arch"}),
            repo=frozenset({"community", "community-testing", "multilib", "multilib-testing"}),
            git=GitRepo(
                url="https://git.archlinux.org/svntogit/community.git",
                branch="packages/${BASE}",
                path="repos/${REPO}-${ARCH}",
            ),
        ),
    ]
)


def lookup_git_repo(repo: str, base: str, arch: str) -> GitRepo | None:
    """
    Look up `base` in the default registry for the running operating system.
    """
    return DEFAULT_REGISTRY.find(repo, base, arch)
