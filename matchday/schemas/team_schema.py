from pydantic import BaseModel, ConfigDict, constr
from typing import List, Optional


class TeamCreate(BaseModel):
    name: constr(min_length=1, max_length=100)
    color: Optional[str] = None


class PlayerCreate(BaseModel):
    name: constr(min_length=1)
    position: Optional[str] = None


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    team_id: int
    position: Optional[str] = None
    motm_awards: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: Optional[str] = None
    players: List[PlayerResponse] = []
