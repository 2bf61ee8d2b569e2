"""
Connexion à la base de données (SQLAlchemy, moteur synchrone).

Une session par requête via la dépendance get_db ; le moteur et son pool
sont les seuls objets partagés entre requêtes.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from student_api.config import settings


def create_db_engine(url: str) -> Engine:
    """
    Crée le moteur pour une URL donnée.
    SQLite en mémoire : une seule connexion partagée entre threads (StaticPool).
    """
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            options["poolclass"] = StaticPool
        return create_engine(url, **options)
    return create_engine(url, pool_pre_ping=True)


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dépendance FastAPI — ouvre une session et la ferme (rollback implicite) après la requête."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
