from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from matchday.models.team import Team
from matchday.models.player import Player
from matchday.schemas.team_schema import TeamCreate, PlayerCreate
from matchday.utils.logger_config import app_logger as logger


def create_team(team_data: TeamCreate, db: Session) -> Team:
    if db.query(Team).filter(Team.name == team_data.name).first():
        raise ValueError(f"Ya existe un equipo llamado '{team_data.name}'")

    team = Team(name=team_data.name, color=team_data.color)
    db.add(team)
    db.commit()
    db.refresh(team)

    logger.info(f"Equipo creado con ID {team.id}: {team.name}")
    return team


def list_teams(db: Session) -> List[Team]:
    return db.query(Team).options(joinedload(Team.players)).order_by(Team.name).all()


def create_player(team_id: int, player_data: PlayerCreate, db: Session) -> Player:
    team = db.get(Team, team_id)
    if not team:
        raise ValueError("Equipo no encontrado")

    player = Player(name=player_data.name, position=player_data.position, team_id=team.id)
    db.add(player)
    db.commit()
    db.refresh(player)

    logger.info(f"Jugador {player.name} (id={player.id}) agregado al equipo {team.name}")
    return player


def list_players(db: Session, team_id: Optional[int] = None) -> List[Player]:
    query = db.query(Player)
    if team_id is not None:
        query = query.filter(Player.team_id == team_id)
    return query.order_by(Player.id).all()


def get_players_for_teams(team_ids, db: Session) -> List[Player]:
    """
    Devuelve los jugadores de los equipos dados (local y visitante de un partido).
    """
    return (
        db.query(Player)
        .filter(Player.team_id.in_(list(team_ids)))
        .order_by(Player.team_id, Player.id)
        .all()
    )
