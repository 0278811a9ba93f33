from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Response(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    namespace: str
    inbound: int = 0
    outbound: int = 0
