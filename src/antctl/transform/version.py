"""Shape the per-component version endpoints into one ``version`` output."""

from __future__ import annotations

import importlib.metadata
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import RequestError


def get_client_version() -> str:
    try:
        return importlib.metadata.version("antctl")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


class ComponentVersion(BaseModel):
    """Wire shape shared by ``/version`` and the controller info resource."""

    model_config = ConfigDict(extra="ignore")

    version: str


class Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_version: str = Field(alias="clientVersion")
    agent_version: Optional[str] = Field(default=None, alias="agentVersion")
    controller_version: Optional[str] = Field(
        default=None, alias="controllerVersion"
    )
    flow_aggregator_version: Optional[str] = Field(
        default=None, alias="flowAggregatorVersion"
    )


def agent_transform(info: ComponentVersion) -> Response:
    return Response(client_version=get_client_version(), agent_version=info.version)


def controller_transform(info: ComponentVersion) -> Response:
    return Response(
        client_version=get_client_version(), controller_version=info.version
    )


def flow_aggregator_transform(info: ComponentVersion) -> Response:
    return Response(
        client_version=get_client_version(), flow_aggregator_version=info.version
    )


def request_error_fallback(_error: RequestError) -> Response:
    # The client version is still worth printing when the backend is down.
    return Response(client_version=get_client_version())
