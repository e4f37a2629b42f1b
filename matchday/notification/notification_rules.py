from datetime import datetime
from sqlalchemy.orm import Session

from matchday.config import settings
from matchday.models import Notification


"""
notification_rules.py

Centraliza las reglas que deciden si una notificación PUEDE enviarse ahora.

Este módulo NO envía notificaciones, NO modifica estados y NO hace commits.
Sólo lee lo necesario y devuelve un booleano, así que se testea aislado.

REGLAS ACTUALES
---------------
Canal "email":
1. La notificación está en estado "pending".
2. No agotó los reintentos (attempts < NOTIFICATION_MAX_ATTEMPTS).
3. El usuario existe y tiene email.
4. Evento "EMAIL_VERIFICATION": no requiere nada más.
5. Evento "VOTE_CONFIRMATION": el email del usuario tiene que estar verificado
   y el payload traer match_id.

Cualquier cambio sobre cuándo se envía una notificación va acá.
"""


def can_send_notification(
    db: Session,
    notification: Notification,
    now: datetime | None = None,
) -> bool:
    """
    Determina si una notificación puede enviarse ahora.
    """
    now = now or datetime.utcnow()

    if notification.status != "pending":
        return False

    if notification.available_at and notification.available_at > now:
        return False

    if (notification.attempts or 0) >= settings.NOTIFICATION_MAX_ATTEMPTS:
        return False

    if notification.channel == "email":
        return _can_send_email_notification(db, notification)

    # Canal no soportado
    return False


def _can_send_email_notification(
    db: Session,
    notification: Notification,
) -> bool:
    user = notification.user
    if not user or not user.email:
        return False

    if notification.event_type == "EMAIL_VERIFICATION":
        return bool((notification.payload or {}).get("token"))

    if notification.event_type == "VOTE_CONFIRMATION":
        return _can_send_vote_confirmation(notification)

    # Evento no soportado
    return False


def _can_send_vote_confirmation(notification: Notification) -> bool:
    payload = notification.payload or {}
    if not payload.get("match_id"):
        return False

    return notification.user.is_email_verified
