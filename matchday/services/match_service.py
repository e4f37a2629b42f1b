from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from matchday.models.match import Match, MatchStatus, ALLOWED_STATUS_TRANSITIONS
from matchday.models.team import Team
from matchday.schemas.match_schema import MatchCreate
from matchday.utils.logger_config import app_logger as logger


def create_match(match_data: MatchCreate, db: Session) -> Match:
    if match_data.home_team_id == match_data.away_team_id:
        raise ValueError("El equipo local y el visitante deben ser distintos")

    for team_id in (match_data.home_team_id, match_data.away_team_id):
        if not db.get(Team, team_id):
            raise ValueError(f"Equipo {team_id} no encontrado")

    new_match = Match(
        match_date=match_data.match_date,
        home_team_id=match_data.home_team_id,
        away_team_id=match_data.away_team_id,
        status=MatchStatus.scheduled,
    )

    db.add(new_match)
    db.commit()
    db.refresh(new_match)

    logger.info(f"Match creado con ID {new_match.id} y fecha {new_match.match_date}")
    return new_match


def get_match(match_id: int, db: Session) -> Optional[Match]:
    return (
        db.query(Match)
        .options(joinedload(Match.home_team), joinedload(Match.away_team))
        .filter(Match.id == match_id)
        .first()
    )


def list_matches(db: Session, status: Optional[MatchStatus] = None) -> List[Match]:
    query = db.query(Match).options(joinedload(Match.home_team), joinedload(Match.away_team))
    if status is not None:
        query = query.filter(Match.status == status)
    return query.order_by(Match.match_date).all()


def update_match_status(match: Match, new_status: MatchStatus, db: Session, now: datetime | None = None) -> Match:
    """
    Cambia el estado del partido respetando scheduled -> live -> finished.
    updated_at queda con la hora del cambio: al finalizar es la hora desde la
    que corre el período de gracia de la votación.
    """
    if new_status not in ALLOWED_STATUS_TRANSITIONS[match.status]:
        raise ValueError(
            f"Transición inválida: {match.status.value} -> {new_status.value}"
        )

    now = now or datetime.utcnow()
    previous = match.status
    match.status = new_status
    match.updated_at = now

    db.commit()
    db.refresh(match)

    logger.info(f"Match {match.id}: {previous.value} -> {new_status.value} a las {now.isoformat()}")
    return match


def update_match_score(match: Match, home_score: int, away_score: int, db: Session) -> Match:
    # Con el partido terminado updated_at es la hora de cierre y no se toca
    if match.status != MatchStatus.live:
        raise ValueError("Sólo se puede actualizar el marcador de un partido en vivo")

    match.home_score = home_score
    match.away_score = away_score
    db.commit()
    db.refresh(match)

    logger.info(f"Match {match.id}: marcador {home_score} - {away_score}")
    return match


def start_due_matches(db: Session, now: datetime | None = None) -> int:
    """
    Pasa a live los partidos programados cuya fecha ya llegó.
    Devuelve la cantidad de partidos actualizados.
    """
    now = now or datetime.utcnow()

    due_ids = [
        row[0] for row in db.query(Match.id).filter(
            Match.status == MatchStatus.scheduled,
            Match.match_date <= now,
        ).all()
    ]

    if not due_ids:
        logger.info("No hay partidos programados para pasar a live")
        return 0

    db.execute(
        update(Match)
        .where(Match.id.in_(due_ids), Match.status == MatchStatus.scheduled)
        .values(status=MatchStatus.live, updated_at=now)
    )
    db.commit()

    logger.info(f"{len(due_ids)} partidos pasaron a live: {due_ids}")
    return len(due_ids)
