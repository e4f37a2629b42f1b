from typing import Optional

from pydantic import BaseModel


class StandingRow(BaseModel):
    team_id: int
    team_name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0


class PlayerStatRow(BaseModel):
    player_id: int
    player_name: str
    team_id: int
    team_name: Optional[str] = None
    value: int
