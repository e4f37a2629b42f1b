from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict


class MotmRunSummary(BaseModel):
    processed_count: int = 0
    awarded_matches: List[str] = []


class MotmAwardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    player_id: int
    player_name: str
    match_label: str
    vote_count: int
    created_at: datetime
