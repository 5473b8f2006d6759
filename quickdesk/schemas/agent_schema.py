from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AgentProfileResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str
    specializations: List[str] = []
    rating: float
    total_ratings: int
    bio: str = ""
    experience: str = ""
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UpdateAgentProfileRequest(BaseModel):
    specializations: Optional[List[str]] = None
    bio: Optional[str] = Field(default=None, max_length=4000)
    experience: Optional[str] = Field(default=None, max_length=4000)


class RateAgentRequest(BaseModel):
    # Range is checked by the rating service so out-of-range values get a 400
    rating: float
    comment: Optional[str] = Field(default=None, max_length=2000)


class RateAgentResponse(BaseModel):
    message: str
    new_rating: float
    total_ratings: int


class BestProvider(BaseModel):
    id: int
    name: str
    rating: float
    specializations: List[str]
    score: float
