from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from matchday.config import settings
from matchday.models import Match, MatchStatus, MatchVote, MotmAward, Player
from matchday.schemas.motm_schema import MotmRunSummary, MotmAwardResponse
from matchday.utils.voting_window import grace_period_delta, voting_ends_at
from matchday.utils.logger_config import app_logger as logger


def pick_motm(vote_counts: Dict[int, int], threshold: int = 0) -> Optional[int]:
    """
    Devuelve el player_id ganador o None.

    Empates: gana el id más bajo, así el resultado no depende del orden en
    que vienen los votos. Con threshold > 0 el máximo tiene que alcanzarlo.
    """
    if not vote_counts:
        return None

    max_votes = max(vote_counts.values())
    if threshold and max_votes < threshold:
        return None

    tied_players = sorted(pid for pid, count in vote_counts.items() if count == max_votes)
    return tied_players[0]


def get_matches_pending_motm(db: Session) -> List[Match]:
    return (
        db.query(Match)
        .outerjoin(MotmAward, MotmAward.match_id == Match.id)
        .options(joinedload(Match.home_team), joinedload(Match.away_team))
        .filter(Match.status == MatchStatus.finished, MotmAward.id.is_(None))
        .order_by(Match.match_date)
        .all()
    )


def count_votes_in_window(db: Session, match_id: int, ends_at: datetime) -> Dict[int, int]:
    rows = (
        db.query(MatchVote.player_id)
        .filter(MatchVote.match_id == match_id, MatchVote.created_at <= ends_at)
        .all()
    )
    return dict(Counter(row[0] for row in rows))


def increment_player_motm_awards(db: Session, player_id: int, delta: int = 1) -> None:
    db.execute(
        update(Player)
        .where(Player.id == player_id)
        .values(motm_awards=Player.motm_awards + delta)
    )
    db.commit()


def _award_match(
    db: Session,
    match: Match,
    now: datetime,
    grace_period: timedelta,
    threshold: int,
) -> bool:
    """
    Procesa un partido. Devuelve True si se otorgó el MOTM en esta pasada.
    """
    ends_at = voting_ends_at(match, grace_period)
    if ends_at is None:
        logger.warning(f"Match {match.id} finalizado sin updated_at, se omite")
        return False

    if now < ends_at:
        logger.info(f"Match {match.id} ({match.label}): votación abierta hasta {ends_at.isoformat()}")
        return False

    logger.info(f"Procesando MOTM del match {match.id} ({match.label}). Votación cerró a las {ends_at.isoformat()}")

    vote_counts = count_votes_in_window(db, match.id, ends_at)
    if not vote_counts:
        logger.info(f"Match {match.id} sin votos dentro de la ventana")
        return False

    winner_id = pick_motm(vote_counts, threshold)
    max_votes = max(vote_counts.values())
    if winner_id is None:
        logger.info(f"Match {match.id}: máximo de {max_votes} votos no alcanza el umbral {threshold}")
        return False

    tied = [pid for pid, count in vote_counts.items() if count == max_votes]
    if len(tied) > 1:
        logger.info(f"Empate en match {match.id} entre {sorted(tied)}, se elige {winner_id}")

    db.add(MotmAward(match_id=match.id, player_id=winner_id, vote_count=max_votes, created_at=now))
    try:
        db.flush()
        db.commit()
    except IntegrityError:
        # Otra corrida ya lo otorgó
        db.rollback()
        logger.warning(f"El match {match.id} ya tiene MOTM, se omite")
        return False

    try:
        increment_player_motm_awards(db, winner_id)
    except Exception:
        # El premio queda; sólo el contador queda desfasado
        db.rollback()
        logger.exception(f"Error incrementando el contador MOTM del jugador {winner_id}")

    logger.info(f"MOTM del match {match.id} para el jugador {winner_id} con {max_votes} votos")
    return True


def determine_motm_awards(
    db: Session,
    now: datetime | None = None,
    grace_period: timedelta | None = None,
    threshold: int | None = None,
) -> MotmRunSummary:
    """
    Pasada batch: otorga el MOTM de los partidos finalizados cuya votación ya
    cerró. Es idempotente; un partido que falla no frena al resto.
    """
    now = now or datetime.utcnow()
    grace_period = grace_period_delta(grace_period)
    threshold = settings.MOTM_VOTE_THRESHOLD if threshold is None else threshold

    logger.info(f"Determinación MOTM iniciada a las {now.isoformat()}")

    # Si esta consulta falla se aborta toda la pasada
    matches = get_matches_pending_motm(db)

    summary = MotmRunSummary()
    for match in matches:
        summary.processed_count += 1
        label = match.label
        try:
            if _award_match(db, match, now, grace_period, threshold):
                summary.awarded_matches.append(label)
        except Exception:
            logger.exception(f"Error procesando MOTM del match {match.id}")
            db.rollback()

    logger.info(
        f"Determinación MOTM finalizada. Procesados: {summary.processed_count}, "
        f"otorgados: {len(summary.awarded_matches)}"
    )
    return summary


def list_motm_awards(db: Session) -> List[MotmAwardResponse]:
    awards = (
        db.query(MotmAward)
        .options(
            joinedload(MotmAward.player),
            joinedload(MotmAward.match).joinedload(Match.home_team),
            joinedload(MotmAward.match).joinedload(Match.away_team),
        )
        .order_by(MotmAward.created_at.desc(), MotmAward.id.desc())
        .all()
    )

    return [
        MotmAwardResponse(
            id=award.id,
            match_id=award.match_id,
            player_id=award.player_id,
            player_name=award.player.name,
            match_label=award.match.label,
            vote_count=award.vote_count,
            created_at=award.created_at,
        )
        for award in awards
    ]


def revoke_motm_award(db: Session, award_id: int) -> None:
    award = db.get(MotmAward, award_id)
    if not award:
        raise ValueError("Premio MOTM no encontrado")

    player = db.get(Player, award.player_id)
    match_id = award.match_id

    db.delete(award)
    if player and player.motm_awards > 0:
        player.motm_awards -= 1
    db.commit()

    logger.info(f"MOTM {award_id} del match {match_id} revocado por un administrador")
