"""
The `pacmeta` APIs.

`pacmeta` normalizes the metadata declared by recipe documents (`.SRCINFO`
files) into `PackageInfo` records, and decides whether two version constraints
on the same name can be satisfied at once.
"""

import logging
import os

from pacmeta._package import PackageInfo, RpcPackageInfo, all_depends, build_path, repo_path
from pacmeta._reference import (
    ConstraintOperation,
    PackageReference,
    VersionConstraint,
    constraints_compatible,
    is_provided_by,
)
from pacmeta._repo import (
    DEFAULT_REGISTRY,
    GitRepo,
    PackageRepo,
    RepoRegistry,
    RepoRegistryError,
    detect_os_id,
    lookup_git_repo,
)
from pacmeta._rpc import RpcError, rpc_package_info, rpc_package_infos
from pacmeta._srcinfo import SrcInfoReader, parse_srcinfo
from pacmeta._vercmp import VersionComparator, vercmp
from pacmeta._version import __version__

# Only the package logger is configured; the root logger is left to the application.
logging.getLogger(__name__).setLevel(os.environ.get("PACMETA_LOGLEVEL", "INFO").upper())

__all__ = [
    "__version__",
    "ConstraintOperation",
    "DEFAULT_REGISTRY",
    "GitRepo",
    "PackageInfo",
    "PackageReference",
    "PackageRepo",
    "RepoRegistry",
    "RepoRegistryError",
    "RpcError",
    "RpcPackageInfo",
    "SrcInfoReader",
    "VersionComparator",
    "VersionConstraint",
    "all_depends",
    "build_path",
    "constraints_compatible",
    "detect_os_id",
    "is_provided_by",
    "lookup_git_repo",
    "parse_srcinfo",
    "repo_path",
    "rpc_package_info",
    "rpc_package_infos",
    "vercmp",
]
