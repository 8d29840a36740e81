from pydantic import BaseModel
from typing import List


class FeatureConfigResponse(BaseModel):
    id: str
    enabled: bool
    label: str
    route: str


class HouseFeaturesResponse(BaseModel):
    house_id: str
    enabled: List[str]
    features: List[FeatureConfigResponse]
