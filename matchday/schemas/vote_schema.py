from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from matchday.schemas.match_schema import MatchResponse
from matchday.schemas.team_schema import PlayerResponse


class VoteCreate(BaseModel):
    player_id: int


class VoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    player_id: int
    created_at: datetime
    # Aviso no fatal (ej: no se pudo encolar el email de confirmación)
    warning: Optional[str] = None


class VotableMatchResponse(BaseModel):
    match: Optional[MatchResponse] = None
    voting_ends_at: Optional[datetime] = None
    has_voted: bool = False


class VoteResultsResponse(BaseModel):
    match_id: int
    total_votes: int
    votes: Dict[int, int]
    leading_player_id: Optional[int] = None


class MatchCandidatesResponse(BaseModel):
    match_id: int
    players: List[PlayerResponse]
