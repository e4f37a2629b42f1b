from datetime import datetime

from sqlalchemy.orm import Session

from matchday.models.user import User
from matchday.schemas.user_schema import UserCreate
from matchday.services.auth_service import create_email_verification_token, decode_email_verification_token
from matchday.services.notification_service import create_notification
from matchday.utils.logger_config import app_logger as logger


def create_user(user_data: UserCreate, db: Session, is_admin: bool = False) -> User:

    existing = db.query(User).filter(
        (User.email == user_data.email) |
        (User.username == user_data.username)
    ).first()

    if existing:
        raise ValueError("El email o el username ya están registrados")

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        is_admin=is_admin,
    )
    new_user.set_password(user_data.password)

    db.add(new_user)
    db.flush()

    # El link de verificación sale por la misma cola que las confirmaciones de voto
    create_notification(
        db,
        user_id=new_user.id,
        event_type="EMAIL_VERIFICATION",
        channel="email",
        payload={"token": create_email_verification_token(new_user)},
    )

    db.commit()
    db.refresh(new_user)

    logger.info(f"Usuario creado: {new_user.username}")

    return new_user


def verify_email(token: str, db: Session, now: datetime | None = None) -> User:
    payload = decode_email_verification_token(token)

    user = db.query(User).filter(User.username == payload["sub"]).first()
    if not user or user.email != payload.get("email"):
        raise ValueError("Token de verificación inválido o expirado")

    if user.email_verified_at is None:
        user.email_verified_at = now or datetime.utcnow()
        db.commit()
        db.refresh(user)
        logger.info(f"Email verificado para {user.username}")

    return user
