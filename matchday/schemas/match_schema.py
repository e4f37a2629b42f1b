from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from matchday.models.match import MatchStatus
from matchday.models.match_event import MatchEventType


# Para crear un nuevo Match (input del cliente)
class MatchCreate(BaseModel):
    match_date: datetime = Field(default_factory=datetime.utcnow)
    home_team_id: int
    away_team_id: int


class MatchStatusUpdate(BaseModel):
    status: MatchStatus


class MatchScoreUpdate(BaseModel):
    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)


class TeamSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_date: datetime
    status: MatchStatus
    home_team: TeamSummary
    away_team: TeamSummary
    home_score: int
    away_score: int
    updated_at: Optional[datetime] = None


class StartDueMatchesResponse(BaseModel):
    updated_count: int


class MatchEventCreate(BaseModel):
    player_id: int
    event_type: MatchEventType
    minute: int = Field(..., ge=0, le=200)
    description: Optional[str] = None
    # Sólo para goles: se registra además un evento 'assist' para este jugador
    assist_player_id: Optional[int] = None


class MatchEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    player_id: int
    event_type: MatchEventType
    minute: int
    description: Optional[str] = None
    created_at: datetime
