# matchday/notification/notification_worker.py
import asyncio
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from matchday.config import settings
from matchday.database import SessionLocal
from matchday.models import Notification
from matchday.notification.email_sender import EmailNotificationSender
from matchday.notification.notification_dispatcher import dispatch_pending_notifications
from matchday.utils.logger_config import app_logger as logger


def register_failed_attempt(notification: Notification, error: Exception, now: datetime) -> None:
    """
    Reintento con espera lineal; agotados los intentos queda en 'failed'.
    """
    notification.attempts = (notification.attempts or 0) + 1
    notification.last_error = str(error)[:1000]

    if notification.attempts >= settings.NOTIFICATION_MAX_ATTEMPTS:
        notification.status = "failed"
        logger.error(
            f"Notificación ID={notification.id} descartada tras {notification.attempts} intentos"
        )
    else:
        notification.status = "pending"
        notification.available_at = now + timedelta(
            seconds=settings.NOTIFICATION_RETRY_DELAY_SECONDS * notification.attempts
        )


async def deliver_ready_notifications(sender, db: Session, now: datetime | None = None) -> int:
    """
    Envía las notificaciones 'ready'. Devuelve cuántas se enviaron.
    """
    now = now or datetime.utcnow()
    ready_notifications = (
        db.query(Notification)
        .filter(Notification.status == "ready")
        .order_by(Notification.available_at)
        .all()
    )

    sent = 0
    for notification in ready_notifications:
        try:
            await sender.send(notification, db)
            sent += 1
            logger.info(f"Notificación ID={notification.id} enviada por {notification.channel}")
        except Exception as e:
            logger.exception(f"Error enviando notificación ID={notification.id}: {e}")
            db.rollback()
            register_failed_attempt(notification, e, now)
            db.commit()

    return sent


async def notification_worker(sender, poll_interval: float | None = None):
    """
    Worker que revisa notificaciones 'pending' y 'ready'.
    1. Pasa 'pending' a 'ready' usando el dispatcher
    2. Envía las notificaciones 'ready'
    """
    poll_interval = poll_interval or settings.NOTIFICATION_POLL_INTERVAL

    while True:
        db: Session = SessionLocal()
        try:
            try:
                processed = dispatch_pending_notifications(db, now=datetime.utcnow())
                if processed:
                    logger.info(f"Dispatcher: {processed} notificaciones marcadas como 'ready'")
            except Exception as e:
                logger.exception(f"Error en dispatcher: {e}")
                db.rollback()

            await deliver_ready_notifications(sender, db)

        finally:
            db.close()

        await asyncio.sleep(poll_interval)


def run_notification_worker():
    asyncio.run(notification_worker(EmailNotificationSender()))
