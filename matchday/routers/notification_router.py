from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from matchday.database import get_db
from matchday.notification.notification_dispatcher import dispatch_pending_notifications
from matchday.services.auth_service import require_scheduler

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/dispatch", dependencies=[Depends(require_scheduler)])
def dispatch_notifications(db: Session = Depends(get_db)):
    """
    Marca como 'ready' las notificaciones pendientes habilitadas.
    El envío lo hace el worker.
    """
    try:
        processed = dispatch_pending_notifications(db, now=datetime.utcnow())
        return {"processed": processed}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
