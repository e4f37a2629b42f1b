from datetime import datetime
from sqlalchemy.orm import Session
from matchday.models.notification import Notification


def create_notification(
    db: Session,
    *,
    user_id: int,
    event_type: str,
    channel: str,
    payload: dict,
    available_at: datetime | None = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        event_type=event_type,
        channel=channel,
        payload=payload,
        status="pending",
        attempts=0,
        available_at=available_at or datetime.utcnow(),
    )

    db.add(notification)
    return notification


def enqueue_vote_confirmation(db: Session, vote) -> Notification:
    """
    Encola el email de confirmación de un voto ya persistido.
    No hace commit: lo decide quien llama.
    """
    match = vote.match
    payload = {
        "match_id": vote.match_id,
        "player_id": vote.player_id,
        "player_name": vote.player.name if vote.player else "Jugador desconocido",
        "match_details": (
            f"{match.home_team.name} {match.home_score} - "
            f"{match.away_score} {match.away_team.name}"
        ),
    }
    return create_notification(
        db,
        user_id=vote.user_id,
        event_type="VOTE_CONFIRMATION",
        channel="email",
        payload=payload,
    )
