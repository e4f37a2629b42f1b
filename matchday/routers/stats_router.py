from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from matchday.database import get_db
from matchday.schemas.stats_schema import StandingRow, PlayerStatRow
from matchday.services.stats_service import compute_standings, top_players, DEFAULT_RANKING_LIMIT

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/standings", response_model=List[StandingRow])
def get_standings(db: Session = Depends(get_db)):
    return compute_standings(db)


@router.get("/top-scorers", response_model=List[PlayerStatRow])
def get_top_scorers(limit: int = DEFAULT_RANKING_LIMIT, db: Session = Depends(get_db)):
    return top_players(db, "goals", limit)


@router.get("/top-assists", response_model=List[PlayerStatRow])
def get_top_assists(limit: int = DEFAULT_RANKING_LIMIT, db: Session = Depends(get_db)):
    return top_players(db, "assists", limit)


@router.get("/top-yellow-cards", response_model=List[PlayerStatRow])
def get_top_yellow_cards(limit: int = DEFAULT_RANKING_LIMIT, db: Session = Depends(get_db)):
    return top_players(db, "yellow_cards", limit)


@router.get("/top-red-cards", response_model=List[PlayerStatRow])
def get_top_red_cards(limit: int = DEFAULT_RANKING_LIMIT, db: Session = Depends(get_db)):
    return top_players(db, "red_cards", limit)


@router.get("/top-motm", response_model=List[PlayerStatRow])
def get_top_motm(limit: int = DEFAULT_RANKING_LIMIT, db: Session = Depends(get_db)):
    return top_players(db, "motm_awards", limit)
