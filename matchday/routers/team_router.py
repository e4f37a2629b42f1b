from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from matchday.database import get_db
from matchday.models import User
from matchday.schemas.team_schema import TeamCreate, TeamResponse, PlayerCreate, PlayerResponse
from matchday.services.auth_service import require_admin
from matchday.services.team_service import create_team, list_teams, create_player, list_players

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_new_team(
    team_data: TeamCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        return create_team(team_data, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[TeamResponse])
def get_teams(db: Session = Depends(get_db)):
    return list_teams(db)


@router.post("/{team_id}/players", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
def add_player_to_team(
    team_id: int,
    player_data: PlayerCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        return create_player(team_id, player_data, db)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{team_id}/players", response_model=List[PlayerResponse])
def get_team_players(team_id: int, db: Session = Depends(get_db)):
    return list_players(db, team_id=team_id)
