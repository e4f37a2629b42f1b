from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from matchday.exceptions import (
    Unauthenticated,
    UnverifiedIdentity,
    VotingClosed,
    MatchNotFound,
    InvalidPlayer,
    DuplicateVote,
    ResultsHidden,
    StorageFailure,
)
from matchday.models import Match, MatchStatus, MatchVote, Player, User
from matchday.services.match_service import get_match
from matchday.services.notification_service import enqueue_vote_confirmation
from matchday.services.team_service import get_players_for_teams
from matchday.utils.voting_window import is_voting_open, can_reveal_results
from matchday.utils.logger_config import app_logger as logger


CONFIRMATION_WARNING = "Tu voto quedó registrado, pero no pudimos enviar el email de confirmación"
DUPLICATE_VOTE_CONSTRAINT = "uq_match_vote_user"


def _is_duplicate_vote_error(error: IntegrityError) -> bool:
    """
    True sólo si la violación es la de un voto por usuario y partido.
    PostgreSQL informa el nombre de la constraint; SQLite sólo las columnas.
    """
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name:
        return constraint_name == DUPLICATE_VOTE_CONSTRAINT

    message = str(error.orig)
    return (
        DUPLICATE_VOTE_CONSTRAINT in message
        or "UNIQUE constraint failed: match_votes.match_id, match_votes.user_id" in message
    )


@dataclass
class VoteResult:
    vote: MatchVote
    warning: Optional[str] = None


def has_user_voted(db: Session, user_id: int, match_id: int) -> bool:
    return db.query(MatchVote.id).filter(
        MatchVote.user_id == user_id,
        MatchVote.match_id == match_id,
    ).first() is not None


def cast_vote(
    db: Session,
    user: Optional[User],
    match_id: int,
    player_id: int,
    now: datetime | None = None,
) -> VoteResult:
    """
    Valida y guarda un voto. Los chequeos cortan en el primer error:
    1. usuario autenticado
    2. email verificado
    3. partido existente con la votación abierta
    4. jugador de alguno de los dos equipos
    5. sin voto previo (lo vuelve a garantizar la constraint única al insertar)
    Después del commit encola la confirmación; si eso falla el voto queda igual.
    """
    now = now or datetime.utcnow()

    if user is None:
        raise Unauthenticated()

    if not user.is_email_verified:
        raise UnverifiedIdentity()

    try:
        match = get_match(match_id, db)
        if not match:
            raise MatchNotFound()

        if not is_voting_open(match, now):
            raise VotingClosed()

        player = db.get(Player, player_id)
        if not player or player.team_id not in match.team_ids:
            raise InvalidPlayer()

        if has_user_voted(db, user.id, match.id):
            raise DuplicateVote()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error leyendo datos para el voto de user={user.id} en match={match_id}")
        raise StorageFailure() from e

    vote = MatchVote(match_id=match.id, player_id=player.id, user_id=user.id, created_at=now)
    db.add(vote)

    try:
        db.flush()
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_duplicate_vote_error(e):
            # Otro request del mismo usuario ganó la carrera
            logger.warning(f"Voto duplicado rechazado por la base: user={user.id} match={match.id}")
            raise DuplicateVote()
        logger.exception(f"Violación de integridad guardando voto de user={user.id} en match={match.id}")
        raise StorageFailure() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error guardando voto de user={user.id} en match={match.id}")
        raise StorageFailure() from e

    db.refresh(vote)
    logger.info(f"Voto registrado: user={user.id} match={match.id} player={player.id}")

    warning = None
    try:
        enqueue_vote_confirmation(db, vote)
        db.commit()
    except Exception:
        db.rollback()
        logger.warning(
            f"No se pudo encolar la confirmación del voto {vote.id}", exc_info=True
        )
        warning = CONFIRMATION_WARNING

    return VoteResult(vote=vote, warning=warning)


def get_votable_match(db: Session, now: datetime | None = None) -> Optional[Match]:
    """
    Primer partido (por fecha) con la votación abierta, o None.
    """
    now = now or datetime.utcnow()

    matches = (
        db.query(Match)
        .filter(Match.status.in_([MatchStatus.live, MatchStatus.finished]))
        .order_by(Match.match_date)
        .all()
    )

    for match in matches:
        if is_voting_open(match, now):
            return match
    return None


def get_match_candidates(db: Session, match_id: int) -> List[Player]:
    match = get_match(match_id, db)
    if not match:
        raise MatchNotFound()
    return get_players_for_teams(match.team_ids, db)


def tally_votes(player_ids) -> Dict[int, int]:
    return dict(Counter(player_ids))


def get_vote_results(
    db: Session,
    user: Optional[User],
    match_id: int,
    now: datetime | None = None,
) -> Dict[int, int]:
    now = now or datetime.utcnow()

    if user is None:
        raise Unauthenticated("Tenés que iniciar sesión para ver los resultados")

    match = get_match(match_id, db)
    if not match:
        raise MatchNotFound()

    voted = has_user_voted(db, user.id, match.id)
    if not can_reveal_results(is_voting_open(match, now), voted):
        raise ResultsHidden()

    rows = db.query(MatchVote.player_id).filter(MatchVote.match_id == match.id).all()
    return tally_votes(row[0] for row in rows)
