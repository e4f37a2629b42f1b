# matchday/notification/notification_dispatcher.py
from datetime import datetime
from sqlalchemy.orm import Session
from matchday.models import Notification
from matchday.notification.notification_rules import can_send_notification
from matchday.utils.logger_config import app_logger as logger


def dispatch_pending_notifications(
    db: Session,
    now: datetime | None = None,
    limit: int = 50
) -> int:
    """
    Pasa a 'ready' las notificaciones 'pending' que las reglas habilitan.
    """
    now = now or datetime.utcnow()
    logger.info(f"Dispatch iniciado a las {now.isoformat()}")

    notifications = (
        db.query(Notification)
        .filter(
            Notification.status == "pending",
            Notification.available_at <= now,
        )
        .order_by(Notification.available_at)
        .limit(limit)
        .all()
    )

    processed = 0

    for notification in notifications:
        if not can_send_notification(db, notification, now):
            continue
        notification.status = "ready"
        processed += 1

    db.commit()

    logger.info(f"Dispatch finalizado. Notificaciones procesadas: {processed}")
    return processed
