"""
Parsing of recipe documents (`.SRCINFO` files) into `PackageInfo` records.

A recipe document is a flat list of `key = value` lines. A `pkgbase` line opens
the document-wide section whose values act as defaults, and each `pkgname` line
opens a per-package section whose values override those defaults:

```
pkgbase = foo
	pkgver = 1.0
	pkgrel = 1
	depends = glibc
pkgname = foo
pkgname = foo-docs
	depends =
```

Parsing happens in two passes. `SrcInfoReader` classifies lines and groups the
pairs into sections; `parse_srcinfo` then materializes one record for each
package section, in declaration order.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from pacmeta._package import PackageInfo, RpcPackageInfo
from pacmeta._reference import PackageReference, is_provided_by
from pacmeta._vercmp import VersionComparator, vercmp

logger = logging.getLogger(__name__)

_LINE_PATTERN = re.compile(r"[\t ]*(\w+)[\t ]*=[\t ]*(.*?)[\t ]*")

_ANY_ARCH = "any"


def classify_line(line: str) -> tuple[str, str] | None:
    """
    Split a `key = value` line into its key and value, or return `None` for
    anything else (blank lines, comments).
    """
    match = _LINE_PATTERN.fullmatch(line)
    if match is None:
        return None
    return match.group(1), match.group(2)


class SrcInfoReader:
    """
    Groups the pairs of a recipe document into its document-wide section and
    its per-package sections.

    Lines are fed one at a time with `feed`. Pairs are appended to whichever
    section is active: the document-wide section initially and after any
    `pkgbase` line, or the named section after a `pkgname` line. A repeated
    `pkgname` reopens the existing section.
    """

    def __init__(self) -> None:
        """
        Create a new, empty `SrcInfoReader`.
        """
        self.base: list[tuple[str, str]] = []
        self.packages: dict[str, list[tuple[str, str]]] = {}
        self._active = self.base

    def feed(self, line: str) -> None:
        """
        Consume a single line of a recipe document.
        """
        pair = classify_line(line)
        if pair is None:
            return

        key, value = pair
        if key == "pkgbase":
            self._active = self.base
        elif key == "pkgname":
            self._active = self.packages.setdefault(value, [])

        self._active.append(pair)

    def feed_all(self, lines: Iterable[str]) -> SrcInfoReader:
        """
        Consume every line in `lines`, returning this reader.
        """
        for line in lines:
            self.feed(line)
        return self


def _values(pairs: Sequence[tuple[str, str]], key: str) -> list[str]:
    return [value for (k, value) in pairs if k == key]


def _last(values: Sequence[str]) -> str | None:
    return values[-1] if values else None


class _PackageSection:
    """
    The view of one package section, with the document-wide section as fallback.
    """

    def __init__(
        self,
        base: Sequence[tuple[str, str]],
        pairs: Sequence[tuple[str, str]],
        arch: str,
    ) -> None:
        self._base = base
        self._pairs = pairs
        self._arch = arch

    def collect(self, key: str) -> list[str]:
        """
        All values for `key`, from this package if it has any, otherwise from the base.
        """
        # NOTE: A package section that lists a key with no entries is
        # indistinguishable from one that omits it, so both fall back.
        values = _values(self._pairs, key)
        if not values:
            return _values(self._base, key)
        return values

    def collect_arch(self, key: str) -> list[PackageReference]:
        """
        References for `key` and `key_<arch>`, without nameless entries.
        """
        references = []
        for token in self.collect(key) + self.collect(f"{key}_{self._arch}"):
            reference = PackageReference.parse(token)
            if not reference.name:
                logger.debug(f"discarding {key} entry with no name: {token!r}")
                continue
            references.append(reference)
        return references


def _filter_references(
    references: Iterable[PackageReference],
    filter_with: Sequence[PackageReference],
    compare: VersionComparator,
) -> tuple[PackageReference, ...]:
    return tuple(
        r for r in references if not any(is_provided_by(r, w, compare) for w in filter_with)
    )


def _full_version(section: _PackageSection) -> str | None:
    version = _last(section.collect("pkgver"))
    release = _last(section.collect("pkgrel"))
    if version is None or release is None:
        return None

    epoch = _last(section.collect("epoch"))
    if epoch is not None:
        return f"{epoch}:{version}-{release}"
    return f"{version}-{release}"


def _package_info(
    repo: str,
    name: str,
    base_index: int,
    base_count: int,
    rpc_infos: Sequence[RpcPackageInfo],
    base_pairs: Sequence[tuple[str, str]],
    name_pairs: Sequence[tuple[str, str]],
    arch: str,
    git_url: str,
    git_branch: str | None,
    git_commit: str | None,
    git_path: str | None,
    compare: VersionComparator,
) -> PackageInfo | None:
    section = _PackageSection(base_pairs, name_pairs, arch)

    base = _last(_values(base_pairs, "pkgbase"))
    if base is None:
        logger.debug(f"skipping {name}: no pkgbase declared")
        return None

    version = _full_version(section)
    if version is None:
        logger.debug(f"skipping {name}: incomplete pkgver/pkgrel")
        return None

    depends = tuple(section.collect_arch("depends"))
    make_depends = _filter_references(section.collect_arch("makedepends"), depends, compare)
    check_depends = _filter_references(
        section.collect_arch("checkdepends"), depends + make_depends, compare
    )

    info: RpcPackageInfo | None = None
    for rpc_info in rpc_infos:
        if rpc_info.name == name:
            info = rpc_info

    return PackageInfo(
        repo=repo,
        base=base,
        name=name,
        version=version,
        description=_last(section.collect("pkgdesc")),
        maintainer=info.maintainer if info is not None else None,
        first_submitted=info.first_submitted if info is not None else None,
        last_modified=info.last_modified if info is not None else None,
        votes=info.votes if info is not None else 0,
        popularity=info.popularity if info is not None else 0.0,
        base_index=base_index,
        base_count=base_count,
        archs=tuple(a for a in section.collect("arch") if a != _ANY_ARCH),
        url=_last(section.collect("url")),
        licenses=tuple(section.collect("license")),
        groups=tuple(section.collect("groups")),
        pgp_keys=tuple(section.collect("validpgpkeys")),
        depends=depends,
        make_depends=make_depends,
        check_depends=check_depends,
        optional=tuple(section.collect_arch("optdepends")),
        provides=tuple(section.collect_arch("provides")),
        conflicts=tuple(section.collect_arch("conflicts")),
        replaces=tuple(section.collect_arch("replaces")),
        git_url=git_url,
        git_branch=git_branch,
        git_commit=git_commit,
        git_path=git_path,
    )


def parse_srcinfo(
    repo: str,
    srcinfo: str,
    arch: str,
    git_url: str = "",
    git_branch: str | None = None,
    git_commit: str | None = None,
    git_path: str | None = None,
    rpc_infos: Sequence[RpcPackageInfo] = (),
    compare: VersionComparator = vercmp,
) -> list[PackageInfo]:
    """
    Parse a recipe document into one `PackageInfo` per declared package.

    `repo` is the repository the document belongs to, and `arch` the target
    architecture used to pick up `<key>_<arch>` dependency entries.

    The `git_*` arguments describe where the document was retrieved from and are
    copied into every record unchanged. `rpc_infos` supplies popularity
    information, matched to packages by exact name.

    Packages that lack a `pkgbase`, `pkgver` or `pkgrel` are omitted from the
    result rather than reported as errors.
    """
    reader = SrcInfoReader().feed_all(srcinfo.splitlines())
    base_count = len(reader.packages)

    infos = []
    for base_index, (name, pairs) in enumerate(reader.packages.items()):
        info = _package_info(
            repo,
            name,
            base_index,
            base_count,
            rpc_infos,
            reader.base,
            pairs,
            arch,
            git_url,
            git_branch,
            git_commit,
            git_path,
            compare,
        )
        if info is not None:
            infos.append(info)
    return infos
