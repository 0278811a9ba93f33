"""Map resource endpoints onto API-server style REST paths."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .definition import GroupVersionResource, ResourceEndpoint
from .transport import BackendRequest


def resource_path(
    gvr: GroupVersionResource,
    *,
    name: Optional[str] = None,
    namespace: Optional[str] = None,
) -> str:
    if gvr.group:
        prefix = f"/apis/{gvr.group}/{gvr.version}"
    else:
        prefix = f"/api/{gvr.version}"
    if namespace:
        prefix = f"{prefix}/namespaces/{namespace}"
    path = f"{prefix}/{gvr.resource}"
    if name:
        path = f"{path}/{name}"
    return path


def resource_request(
    endpoint: ResourceEndpoint, bound_args: Mapping[str, Any]
) -> BackendRequest:
    """Build a get (named) or list (unnamed) request for ``endpoint``."""
    name = endpoint.resource_name or bound_args.get("name") or None
    namespace = bound_args.get("namespace") if endpoint.namespaced else None
    path = resource_path(
        endpoint.group_version_resource,
        name=str(name) if name else None,
        namespace=str(namespace) if namespace else None,
    )
    return BackendRequest(method="GET", path=path)
