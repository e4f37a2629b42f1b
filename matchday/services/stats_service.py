from typing import Dict, List

from sqlalchemy.orm import Session, joinedload

from matchday.models import Match, MatchStatus, Player, Team
from matchday.schemas.stats_schema import StandingRow, PlayerStatRow


POINTS_PER_WIN = 3
POINTS_PER_DRAW = 1
DEFAULT_RANKING_LIMIT = 10

PLAYER_RANKINGS = {
    "goals": Player.goals,
    "assists": Player.assists,
    "yellow_cards": Player.yellow_cards,
    "red_cards": Player.red_cards,
    "motm_awards": Player.motm_awards,
}


def _apply_result(row: StandingRow, scored: int, conceded: int) -> None:
    row.played += 1
    row.goals_for += scored
    row.goals_against += conceded
    row.goal_difference = row.goals_for - row.goals_against

    if scored > conceded:
        row.wins += 1
        row.points += POINTS_PER_WIN
    elif scored == conceded:
        row.draws += 1
        row.points += POINTS_PER_DRAW
    else:
        row.losses += 1


def compute_standings(db: Session) -> List[StandingRow]:
    """
    Tabla de posiciones calculada con los partidos finalizados.
    Orden: puntos, diferencia de gol y nombre del equipo.
    """
    rows: Dict[int, StandingRow] = {
        team.id: StandingRow(team_id=team.id, team_name=team.name)
        for team in db.query(Team).all()
    }

    finished = db.query(Match).filter(Match.status == MatchStatus.finished).all()
    for match in finished:
        _apply_result(rows[match.home_team_id], match.home_score, match.away_score)
        _apply_result(rows[match.away_team_id], match.away_score, match.home_score)

    return sorted(
        rows.values(),
        key=lambda row: (-row.points, -row.goal_difference, row.team_name),
    )


def top_players(db: Session, stat: str, limit: int = DEFAULT_RANKING_LIMIT) -> List[PlayerStatRow]:
    """
    Ranking de jugadores por una estadística; los que están en cero no aparecen.
    """
    column = PLAYER_RANKINGS.get(stat)
    if column is None:
        raise ValueError(f"Estadística desconocida: {stat}")

    players = (
        db.query(Player)
        .options(joinedload(Player.team))
        .filter(column > 0)
        .order_by(column.desc(), Player.name, Player.id)
        .limit(limit)
        .all()
    )

    return [
        PlayerStatRow(
            player_id=player.id,
            player_name=player.name,
            team_id=player.team_id,
            team_name=player.team.name if player.team else None,
            value=getattr(player, stat),
        )
        for player in players
    ]
