# matchday/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from matchday.config import settings
from matchday.utils.logger_config import app_logger as logger

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite se usa en tests: TestClient corre en otro hilo
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=connect_args)  # usamos logger, no echo

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db():
    import matchday.models
    logger.info("Creando tablas en la base de datos (si no existen)...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tablas creadas correctamente.")

# Esta es la función que FastAPI usará para inyectar la sesión en cada endpoint
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
