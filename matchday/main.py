# matchday/main.py
import threading

from fastapi import FastAPI
import uvicorn

from matchday.config import settings
from matchday.database import init_db
from matchday.utils.logger_config import app_logger as logger
from matchday.routers import (
    auth_router,
    user_router,
    team_router,
    match_router,
    vote_router,
    motm_router,
    notification_router,
    stats_router,
)
from matchday.notification.notification_worker import run_notification_worker

app = FastAPI(title="matchday")

# Registrar rutas
app.include_router(auth_router.router)
app.include_router(user_router.router, prefix="/matchday")
app.include_router(team_router.router)
app.include_router(match_router.router, prefix="/match")
app.include_router(vote_router.router)
app.include_router(motm_router.router)
app.include_router(notification_router.router)
app.include_router(stats_router.router)


@app.get("/matchday")
def home():
    return {"message": "API corriendo correctamente"}


def main():
    logger.info("Inicializando base de datos...")
    init_db()
    logger.info("Base de datos lista.")

    if settings.NOTIFICATION_WORKER_ENABLED:
        worker_thread = threading.Thread(
            target=run_notification_worker,
            name="notification-worker",
            daemon=True
        )
        worker_thread.start()
        logger.info("Worker de notificaciones iniciado")

    logger.info("Levantando servidor FastAPI en http://127.0.0.1:8000...")
    uvicorn.run(
        "matchday.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info"
    )


if __name__ == "__main__":
    main()
