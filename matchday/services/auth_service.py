import secrets

from fastapi import HTTPException, status, Depends, Header
from fastapi.security import OAuth2PasswordBearer

from sqlalchemy.orm import Session
from jose import jwt, JWTError
from datetime import datetime, timedelta
from matchday.models import User
from matchday.database import get_db
from matchday.config import settings

ALGORITHM = "HS256"
EMAIL_VERIFICATION_PURPOSE = "email_verification"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")
# Igual que oauth2_scheme pero sin 401 automático: el voto reporta Unauthenticated
oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def authenticate_user(db: Session, username: str, password: str):
    user = db.query(User).filter(User.username == username).first()
    if not user or not user.check_password(password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciales incorrectas")
    return user

def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_email_verification_token(user: User) -> str:
    return create_access_token(
        {"sub": user.username, "email": user.email, "purpose": EMAIL_VERIFICATION_PURPOSE},
        expires_delta=timedelta(hours=settings.EMAIL_TOKEN_EXPIRE_HOURS),
    )


def decode_email_verification_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise ValueError("Token de verificación inválido o expirado")

    if payload.get("purpose") != EMAIL_VERIFICATION_PURPOSE or not payload.get("sub"):
        raise ValueError("Token de verificación inválido o expirado")
    return payload


def _user_from_token(token: str, db: Session) -> User | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None

    # Los tokens de verificación de email no sirven para autenticarse
    if payload.get("purpose"):
        return None

    username: str = payload.get("sub")
    if username is None:
        return None

    return db.query(User).filter(User.username == username).first()


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    user = _user_from_token(token, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido o expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_user_optional(
    token: str | None = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db)
) -> User | None:
    if not token:
        return None
    return _user_from_token(token, db)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Se requieren permisos de administrador")
    return current_user


def require_scheduler(
    x_scheduler_token: str | None = Header(default=None),
    token: str | None = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db),
) -> None:
    """
    Endpoints de jobs: aceptan el token compartido del scheduler
    (header X-Scheduler-Token) o un administrador logueado.
    """
    if (
        settings.SCHEDULER_TOKEN
        and x_scheduler_token
        and secrets.compare_digest(x_scheduler_token, settings.SCHEDULER_TOKEN)
    ):
        return

    user = _user_from_token(token, db) if token else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Se requiere el token del scheduler o un administrador",
        )
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Se requieren permisos de administrador")
