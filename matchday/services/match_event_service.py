from typing import List

from sqlalchemy import update
from sqlalchemy.orm import Session

from matchday.models import Match, MatchStatus, MatchEvent, MatchEventType, Player
from matchday.schemas.match_schema import MatchEventCreate
from matchday.utils.logger_config import app_logger as logger


# Contador del jugador que incrementa cada tipo de evento
PLAYER_COUNTERS = {
    MatchEventType.goal: Player.goals,
    MatchEventType.assist: Player.assists,
    MatchEventType.yellow_card: Player.yellow_cards,
    MatchEventType.red_card: Player.red_cards,
}


def _increment_player_counter(db: Session, player_id: int, event_type: MatchEventType) -> None:
    column = PLAYER_COUNTERS[event_type]
    db.execute(
        update(Player)
        .where(Player.id == player_id)
        .values({column: column + 1})
    )


def _get_match_player(db: Session, match: Match, player_id: int) -> Player:
    player = db.get(Player, player_id)
    if not player or player.team_id not in match.team_ids:
        raise ValueError(f"El jugador {player_id} no juega este partido")
    return player


def record_match_event(match: Match, event_data: MatchEventCreate, db: Session) -> List[MatchEvent]:
    """
    Registra un evento de un partido en vivo y actualiza las estadísticas.

    - gol: suma al contador del goleador y al marcador de su equipo; si trae
      assist_player_id se registra también el evento 'assist' del compañero.
    - asistencia / amarilla / roja: suma al contador del jugador.

    Devuelve los eventos creados. Todo va en un único commit.
    """
    if match.status != MatchStatus.live:
        raise ValueError("Sólo se pueden registrar eventos de un partido en vivo")

    player = _get_match_player(db, match, event_data.player_id)

    assist_player = None
    if event_data.assist_player_id is not None:
        if event_data.event_type != MatchEventType.goal:
            raise ValueError("Sólo un gol puede tener asistencia")
        assist_player = _get_match_player(db, match, event_data.assist_player_id)
        if assist_player.id == player.id or assist_player.team_id != player.team_id:
            raise ValueError("La asistencia tiene que ser de un compañero del goleador")

    events = [
        MatchEvent(
            match_id=match.id,
            player_id=player.id,
            event_type=event_data.event_type,
            minute=event_data.minute,
            description=event_data.description,
        )
    ]
    if assist_player:
        events.append(
            MatchEvent(
                match_id=match.id,
                player_id=assist_player.id,
                event_type=MatchEventType.assist,
                minute=event_data.minute,
            )
        )

    db.add_all(events)
    for event in events:
        _increment_player_counter(db, event.player_id, event.event_type)

    if event_data.event_type == MatchEventType.goal:
        if player.team_id == match.home_team_id:
            match.home_score = match.home_score + 1
        else:
            match.away_score = match.away_score + 1

    db.commit()
    for event in events:
        db.refresh(event)

    logger.info(
        f"Match {match.id}: {event_data.event_type.value} de {player.name} (id={player.id}) "
        f"al minuto {event_data.minute}"
    )
    return events


def list_match_events(match_id: int, db: Session) -> List[MatchEvent]:
    return (
        db.query(MatchEvent)
        .filter(MatchEvent.match_id == match_id)
        .order_by(MatchEvent.minute, MatchEvent.id)
        .all()
    )
