"""
Configuration partagée pour tous les tests.
Base SQLite en mémoire (StaticPool : une seule connexion partagée), schéma
recréé par reset_schema pour chaque test, dépendance get_db surchargée.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from student_api.database import create_db_engine, get_db
from student_api.init_db import reset_schema
from student_api.main import app
from student_api.models.student import Student


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite:///:memory:")
    reset_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """Client HTTP de test branché sur la base SQLite en mémoire.

    Le lifespan n'est pas déclenché (pas de `with`) : le schéma est déjà créé
    par la fixture engine et la base configurée n'est jamais contactée.
    """
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_students(db_session):
    """Insère directement des lignes en base : add_students((id, name, age, gpa, org), ...)."""
    def _add(*rows):
        for student_id, name, age, gpa, org in rows:
            db_session.add(Student(id=student_id, name=name, age=age, gpa=gpa, organization_name=org))
        db_session.commit()
    return _add


@pytest.fixture
def count_students(session_factory):
    def _count():
        session = session_factory()
        try:
            return session.query(Student).count()
        finally:
            session.close()
    return _count
