from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from matchday.models import User
from matchday.schemas.user_schema import UserCreate, UserResponse, EmailVerificationRequest
from matchday.services.user_service import create_user, verify_email
from matchday.database import get_db
from matchday.services.auth_service import get_current_user


from matchday.utils.logger_config import app_logger as logger

router = APIRouter(prefix="/users", tags=["Users"])

@router.post("/register", response_model=UserResponse)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    try:
        return create_user(user, db)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception:
        logger.exception("Error inesperado al registrar usuario")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.post("/verify-email", response_model=UserResponse)
def verify_user_email(data: EmailVerificationRequest, db: Session = Depends(get_db)):
    try:
        return verify_email(data.token, db)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))


@router.get("/verify-email", response_model=UserResponse)
def verify_user_email_link(token: str, db: Session = Depends(get_db)):
    """
    Variante GET para el link que llega por email.
    """
    return verify_user_email(EmailVerificationRequest(token=token), db)


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
