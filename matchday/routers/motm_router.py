from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from matchday.database import get_db
from matchday.models import User
from matchday.schemas.motm_schema import MotmRunSummary, MotmAwardResponse
from matchday.services.auth_service import require_admin, require_scheduler
from matchday.services.motm_service import determine_motm_awards, list_motm_awards, revoke_motm_award
from matchday.utils.logger_config import app_logger as logger

router = APIRouter(prefix="/motm", tags=["motm"])


@router.post("/determine", response_model=MotmRunSummary, dependencies=[Depends(require_scheduler)])
def run_motm_determination(db: Session = Depends(get_db)):
    """
    Lo invoca el scheduler. Se puede llamar de más: es idempotente.
    """
    try:
        return determine_motm_awards(db)
    except Exception:
        logger.exception("Error en la determinación de MOTM")
        db.rollback()
        raise HTTPException(status_code=500, detail="No se pudo ejecutar la determinación de MOTM")


@router.get("/awards", response_model=List[MotmAwardResponse])
def get_motm_awards(db: Session = Depends(get_db)):
    return list_motm_awards(db)


@router.delete("/awards/{award_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_motm_award(
    award_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        revoke_motm_award(db, award_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
