# matchday/notification/email_sender.py
from datetime import datetime

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from matchday.config import settings
from matchday.models import Notification
from matchday.utils.logger_config import app_logger as logger


def render_email(notification: Notification) -> dict:
    payload = notification.payload or {}

    if notification.event_type == "VOTE_CONFIRMATION":
        subject = "Recibimos tu voto"
        text = (
            f"Votaste a {payload.get('player_name', 'un jugador')} como figura del partido "
            f"{payload.get('match_details', '')}. ¡Gracias por participar!"
        )
    elif notification.event_type == "EMAIL_VERIFICATION":
        link = f"{settings.api_root}/users/verify-email?token={payload['token']}"
        subject = "Verificá tu email"
        text = f"Para poder votar confirmá tu email entrando a: {link}"
    else:
        raise ValueError(f"Evento de email no soportado: {notification.event_type}")

    return {
        "from": settings.EMAIL_FROM,
        "to": notification.user.email,
        "subject": subject,
        "text": text,
    }


class EmailNotificationSender:
    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url or settings.EMAIL_API_URL
        self.api_key = api_key or settings.EMAIL_API_KEY
        self.timeout = timeout
        self.transport = transport

    async def send(self, notification: Notification, db: Session):
        user = notification.user
        if not user:
            raise ValueError("El usuario no existe para esta notificación")

        if not self.api_url:
            raise ValueError("EMAIL_API_URL no está configurado")

        notification_id = notification.id
        message = render_email(notification)

        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        # Se reclama antes del POST: una fila en 'sending' no vuelve a la cola
        notification.status = "sending"
        db.commit()

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.api_url, json=message, headers=headers)
            response.raise_for_status()

        try:
            notification.status = "sent"
            notification.sent_at = datetime.utcnow()
            db.commit()
        except SQLAlchemyError:
            # El email ya salió: no se reintenta, queda en 'sending'
            db.rollback()
            logger.exception(
                f"Notificación ID={notification_id} enviada pero no se pudo marcar como 'sent'"
            )
