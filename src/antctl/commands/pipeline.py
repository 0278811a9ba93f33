"""Request/transform pipeline for generated commands.

``execute`` turns a resolved :class:`Endpoint` plus the values bound on the
command line into a display value:

1. build the HTTP request for the endpoint kind,
2. send it; on :class:`RequestError` return the endpoint fallback if one is
   declared, otherwise propagate,
3. decode the body with the registry codec (an empty body is accepted only
   for write requests),
4. apply the endpoint transform.

Cancellation, decode and transform failures are never routed to the fallback.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote

from ..core.exceptions import AntctlError, RequestError, TransformError
from ..core.logging_utils import log_event
from .codec import ResponseCodec
from .definition import (
    Endpoint,
    NonResourceEndpoint,
    OutputCardinality,
    ResourceEndpoint,
)
from .discovery import resource_request
from .transport import BackendClient, BackendRequest

logger = logging.getLogger("antctl.pipeline")

ResourceRequestBuilder = Callable[[ResourceEndpoint, Mapping[str, Any]], BackendRequest]


def non_resource_request(
    endpoint: NonResourceEndpoint, bound_args: Mapping[str, Any]
) -> BackendRequest:
    path = endpoint.path
    method = endpoint.method
    params: dict[str, str] = {}
    for spec in endpoint.params:
        value = bound_args.get(spec.name)
        if value is None or value == "":
            continue
        if spec.arg:
            path = f"{path.rstrip('/')}/{quote(str(value), safe='')}"
            if endpoint.write_method:
                method = endpoint.write_method
        else:
            params[spec.name] = str(value)
    return BackendRequest(method=method, path=path, params=params)


def _is_write(endpoint: Endpoint, request: BackendRequest) -> bool:
    target = endpoint.target
    return (
        isinstance(target, NonResourceEndpoint)
        and target.write_method is not None
        and request.method == target.write_method
    )


def build_request(
    endpoint: Endpoint,
    bound_args: Mapping[str, Any],
    *,
    resource_request_builder: Optional[ResourceRequestBuilder] = None,
) -> BackendRequest:
    target = endpoint.target
    if isinstance(target, ResourceEndpoint):
        builder = resource_request_builder or resource_request
        return builder(target, bound_args)
    return non_resource_request(target, bound_args)


def execute(
    endpoint: Endpoint,
    bound_args: Mapping[str, Any],
    *,
    client: BackendClient,
    codec: ResponseCodec,
    response_type: Any = None,
    cancel: Optional[threading.Event] = None,
    resource_request_builder: Optional[ResourceRequestBuilder] = None,
) -> Any:
    request = build_request(
        endpoint, bound_args, resource_request_builder=resource_request_builder
    )
    try:
        body = client.send(request, cancel=cancel)
    except RequestError as exc:
        if endpoint.fallback is None:
            raise
        log_event(
            logger,
            logging.INFO,
            "command.request.fallback",
            backend=exc.backend,
            path=request.path,
            status_code=exc.status_code,
            exc=exc,
        )
        return endpoint.fallback(exc)

    many = endpoint.target.cardinality(bound_args) is OutputCardinality.MULTIPLE
    decoded = codec.decode(
        body, response_type, many=many, allow_empty=_is_write(endpoint, request)
    )
    if endpoint.transform is None:
        return decoded
    try:
        return endpoint.transform(decoded)
    except AntctlError:
        raise
    except Exception as exc:
        raise TransformError(
            f"Failed to shape response from {client.backend} {request.path}: {exc}"
        ) from exc
