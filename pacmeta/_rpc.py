"""
Conversion of package index RPC responses into `RpcPackageInfo` records.

Only the decoding of already-fetched JSON lives here; retrieving it is up to
the caller.
"""

from __future__ import annotations

import logging
from typing import Any

from pacmeta._package import RpcPackageInfo

logger = logging.getLogger(__name__)


class RpcError(Exception):
    """
    Raised when an RPC response body is malformed or reports an error.
    """

    pass


def rpc_package_info(repo: str, obj: dict[str, Any]) -> RpcPackageInfo:
    """
    Convert a single RPC result object into an `RpcPackageInfo`.

    `repo` is the repository the result was requested from, since the RPC
    interface itself does not report it.
    """
    if not isinstance(obj, dict):
        raise RpcError(f"expected an RPC result object, got {type(obj).__name__}")

    try:
        name = obj["Name"]
        version = obj["Version"]
    except KeyError as e:
        raise RpcError(f"RPC result is missing required field {e}") from e

    # Results for single-package bases sometimes omit the base.
    base = obj.get("PackageBase") or name

    try:
        votes = int(obj.get("NumVotes") or 0)
        popularity = float(obj.get("Popularity") or 0.0)
    except (TypeError, ValueError) as e:
        raise RpcError(f"RPC result for {name} has malformed votes or popularity") from e

    return RpcPackageInfo(
        repo=repo,
        base=base,
        name=name,
        version=version,
        description=obj.get("Description"),
        maintainer=obj.get("Maintainer"),
        first_submitted=obj.get("FirstSubmitted"),
        last_modified=obj.get("LastModified"),
        votes=votes,
        popularity=popularity,
    )


def rpc_package_infos(repo: str, response: Any) -> list[RpcPackageInfo]:
    """
    Convert a full RPC response body (`{"results": [...]}`) into records.

    Raises `RpcError` if the body reports an error or has an unexpected shape.
    """
    if not isinstance(response, dict):
        raise RpcError(f"expected an RPC response object, got {type(response).__name__}")

    if response.get("type") == "error":
        raise RpcError(f"RPC request failed: {response.get('error', 'unknown error')}")

    results = response.get("results")
    if not isinstance(results, list):
        raise RpcError("RPC response is missing its 'results' list")

    logger.debug(f"decoding {len(results)} RPC results for {repo}")
    return [rpc_package_info(repo, obj) for obj in results]
