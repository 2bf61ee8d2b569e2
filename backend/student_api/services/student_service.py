"""
Service métier pour les élèves : exécution des requêtes et transactions.

La session est injectée par l'appelant (dépendance get_db) ; aucun handle
global n'est utilisé ici. Toute erreur SQLAlchemy provoque un rollback et
est relevée en DatabaseError avec le message brut du driver.
"""

import logging
from contextlib import contextmanager
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_api.config import settings
from student_api.errors import DatabaseError, NotFoundError
from student_api.schemas.student import StudentFilter, StudentIn, StudentResponse
from student_api.services import student_queries as queries

logger = logging.getLogger(__name__)


def _db_error_message(exc: SQLAlchemyError) -> str:
    # Message du driver sans l'enrobage SQLAlchemy (SQL + lien vers la doc)
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


@contextmanager
def _transaction(db: Session):
    """Commit en sortie normale, rollback sur toute erreur."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Transaction annulée : %s", exc)
        raise DatabaseError(_db_error_message(exc)) from exc
    except Exception:
        db.rollback()
        raise


def _bulk_isolation_level(db: Session) -> str:
    # SQLite ne propose pas READ COMMITTED ; ses transactions sont sérialisables
    if db.get_bind().dialect.name == "sqlite":
        return "SERIALIZABLE"
    return settings.BULK_ISOLATION_LEVEL


def _fetch_students(db: Session, query) -> List[StudentResponse]:
    try:
        students = db.execute(query).scalars().all()
    except SQLAlchemyError as exc:
        logger.error("Lecture des élèves échouée : %s", exc)
        raise DatabaseError(_db_error_message(exc)) from exc
    return [StudentResponse.model_validate(s) for s in students]


def list_students(db: Session) -> List[StudentResponse]:
    """Retourne tous les élèves, triés par id."""
    return _fetch_students(db, queries.list_students_query())


def search_students(db: Session, term: str) -> List[StudentResponse]:
    return _fetch_students(
        db, queries.search_by_name_query(term, case_sensitive=settings.SEARCH_CASE_SENSITIVE)
    )


def filter_students(db: Session, criteria: StudentFilter) -> List[StudentResponse]:
    logger.info("Filtre élèves : %s", criteria.model_dump(exclude_none=True))
    return _fetch_students(db, queries.filter_query(criteria))


def list_organizations(db: Session) -> List[str]:
    """Noms d'organisation distincts, chaîne vide exclue."""
    try:
        return list(db.execute(queries.distinct_organizations_query()).scalars().all())
    except SQLAlchemyError as exc:
        logger.error("Lecture des organisations échouée : %s", exc)
        raise DatabaseError(_db_error_message(exc)) from exc


def create_student(db: Session, data: StudentIn) -> int:
    """
    Insère un élève et retourne son id (max(id) + 1).

    La lecture du prochain id et l'INSERT partagent la transaction de la
    session ; deux créations simultanées peuvent calculer le même id, la
    seconde échoue alors sur la clé primaire (DatabaseError).
    """
    with _transaction(db):
        student_id = db.execute(queries.next_id_query()).scalar_one()
        db.execute(queries.insert_student_query(student_id, data))

    logger.info("Élève créé : %s (id=%d)", data.name, student_id)
    return student_id


def update_student(db: Session, student_id: int, data: StudentIn) -> None:
    """
    Remplace nom, âge, GPA et organisation d'un élève existant.
    Lève NotFoundError si l'id n'existe pas.
    """
    with _transaction(db):
        exists = db.execute(queries.exists_query(student_id)).scalar_one()
        if not exists:
            raise NotFoundError("Student not found")
        result = db.execute(queries.update_student_query(student_id, data))

    logger.info("Élève %d mis à jour (%d ligne(s))", student_id, result.rowcount)


def delete_student(db: Session, student_id: int) -> int:
    """
    Supprime un élève et retourne le nombre de lignes supprimées.
    Pas de contrôle d'existence : un id inconnu supprime 0 ligne sans erreur.
    """
    with _transaction(db):
        result = db.execute(queries.delete_student_query(student_id))

    logger.info("Suppression élève %d : %d ligne(s)", student_id, result.rowcount)
    return result.rowcount


def bulk_create_students(db: Session, students: List[StudentIn]) -> int:
    """
    Insère une liste d'élèves dans une seule transaction.

    Le premier id est lu une fois (max(id) + 1) puis incrémenté pour chaque
    ligne, dans l'ordre reçu. Un seul INSERT est exécuté avec toutes les
    lignes ; un échec sur n'importe quelle ligne annule l'ensemble.
    """
    if not students:
        return 0

    with _transaction(db):
        db.connection(execution_options={"isolation_level": _bulk_isolation_level(db)})
        start_id = db.execute(queries.max_id_query()).scalar_one() + 1
        rows = [
            queries.student_values(start_id + offset, data)
            for offset, data in enumerate(students)
        ]
        db.execute(queries.bulk_insert_query(), rows)

    logger.info(
        "Insertion en masse : %d élèves (ids %d à %d)",
        len(rows), start_id, start_id + len(rows) - 1,
    )
    return len(rows)
