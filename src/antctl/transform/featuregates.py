from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict


class FeatureGate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    component: str
    name: str
    status: str
    version: str = ""


FeatureGateList = List[FeatureGate]
