from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from matchday.database import get_db
from matchday.models import User, MatchStatus
from matchday.schemas.match_schema import (
    MatchCreate,
    MatchResponse,
    MatchStatusUpdate,
    MatchScoreUpdate,
    MatchEventCreate,
    MatchEventResponse,
    StartDueMatchesResponse,
)
from matchday.services.auth_service import require_admin, require_scheduler
from matchday.services.match_service import (
    create_match,
    get_match,
    list_matches,
    update_match_status,
    update_match_score,
    start_due_matches,
)
from matchday.services.match_event_service import record_match_event, list_match_events
from matchday.utils.logger_config import app_logger as logger

router = APIRouter()


@router.post("/matches", response_model=MatchResponse, tags=["matches"])
def create_new_match(
    match_data: MatchCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    Crea un partido programado entre dos equipos.
    """
    try:
        match = create_match(match_data, db)
        return get_match(match.id, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/matches", response_model=List[MatchResponse], tags=["matches"])
def get_matches(status: Optional[MatchStatus] = None, db: Session = Depends(get_db)):
    return list_matches(db, status=status)


@router.get("/matches/{match_id}", response_model=MatchResponse, tags=["matches"])
def get_match_detail(match_id: int, db: Session = Depends(get_db)):
    match = get_match(match_id, db)
    if not match:
        raise HTTPException(status_code=404, detail="Match no encontrado")
    return match


@router.patch("/matches/{match_id}/status", response_model=MatchResponse, tags=["matches"])
def change_match_status(
    match_id: int,
    data: MatchStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    match = get_match(match_id, db)
    if not match:
        logger.error(f"Match con id={match_id} no encontrado")
        raise HTTPException(status_code=404, detail="Match no encontrado")

    try:
        return update_match_status(match, data.status, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/matches/{match_id}/score", response_model=MatchResponse, tags=["matches"])
def change_match_score(
    match_id: int,
    data: MatchScoreUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    match = get_match(match_id, db)
    if not match:
        raise HTTPException(status_code=404, detail="Match no encontrado")

    try:
        return update_match_score(match, data.home_score, data.away_score, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/matches/{match_id}/events",
    response_model=List[MatchEventResponse],
    status_code=201,
    tags=["matches"],
)
def add_match_event(
    match_id: int,
    data: MatchEventCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    Carga un evento (gol, asistencia, amarilla, roja) del partido en vivo.
    """
    match = get_match(match_id, db)
    if not match:
        raise HTTPException(status_code=404, detail="Match no encontrado")

    try:
        return record_match_event(match, data, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/matches/{match_id}/events", response_model=List[MatchEventResponse], tags=["matches"])
def get_match_events(match_id: int, db: Session = Depends(get_db)):
    if not get_match(match_id, db):
        raise HTTPException(status_code=404, detail="Match no encontrado")
    return list_match_events(match_id, db)


@router.post(
    "/start-due",
    response_model=StartDueMatchesResponse,
    tags=["matches"],
    dependencies=[Depends(require_scheduler)],
)
def start_due(db: Session = Depends(get_db)):
    """
    Lo llama el scheduler: pasa a live los partidos cuya fecha ya llegó.
    """
    try:
        return StartDueMatchesResponse(updated_count=start_due_matches(db))
    except Exception:
        logger.exception("Error actualizando partidos a live")
        raise HTTPException(status_code=500, detail="Error interno del servidor")
