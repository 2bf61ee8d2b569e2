"""
Construction des requêtes SQL sur la table students.

Toutes les valeurs venant de la requête HTTP sont passées en paramètres liés
(jamais interpolées dans le texte SQL).
"""

import re
from typing import Optional

from sqlalchemy import Select, delete, func, insert, select, update

from student_api.models.student import Student
from student_api.schemas.student import StudentFilter, StudentIn

# Grammaire ASCII stricte : ni espaces, ni "_", ni chiffres non latins
INT_PATTERN = re.compile(r"[+-]?[0-9]+")
FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_int_or_zero(raw: Optional[str]) -> int:
    """Entier de la query string ; une valeur illisible vaut 0 (pas d'erreur)."""
    if raw is None or not INT_PATTERN.fullmatch(raw):
        return 0
    return int(raw)


def parse_float_or_zero(raw: Optional[str]) -> float:
    if raw is None or not FLOAT_PATTERN.fullmatch(raw):
        return 0.0
    return float(raw)


def next_id_query() -> Select:
    """max(id) + 1, ou 1 si la table est vide."""
    return select(func.coalesce(func.max(Student.id), 0) + 1)


def max_id_query() -> Select:
    return select(func.coalesce(func.max(Student.id), 0))


def student_values(student_id: int, data: StudentIn) -> dict:
    return {
        "id": student_id,
        "name": data.name,
        "age": data.age,
        "gpa": data.gpa,
        "organization_name": data.organization_name,
    }


def insert_student_query(student_id: int, data: StudentIn):
    return insert(Student).values(**student_values(student_id, data))


def bulk_insert_query():
    """INSERT sans valeurs : exécuté une seule fois avec la liste des lignes (executemany)."""
    return insert(Student)


def exists_query(student_id: int) -> Select:
    return select(func.count()).select_from(Student).where(Student.id == student_id)


def update_student_query(student_id: int, data: StudentIn):
    return (
        update(Student)
        .where(Student.id == student_id)
        .values(
            name=data.name,
            age=data.age,
            gpa=data.gpa,
            organization_name=data.organization_name,
        )
    )


def delete_student_query(student_id: int):
    return delete(Student).where(Student.id == student_id)


def list_students_query() -> Select:
    return select(Student).order_by(Student.id)


def search_by_name_query(term: str, case_sensitive: bool = False) -> Select:
    """
    Sous-chaîne du nom, jokers des deux côtés.
    Les caractères % et _ du terme sont échappés et cherchés littéralement.
    """
    if case_sensitive:
        condition = Student.name.contains(term, autoescape=True)
    else:
        condition = Student.name.icontains(term, autoescape=True)
    return select(Student).where(condition).order_by(Student.id)


def filter_query(criteria: StudentFilter) -> Select:
    """
    Combine en AND les critères présents ; un critère absent est omis.

    - âge / GPA : BETWEEN inclusif, seulement si les deux bornes sont fournies
      et non vides. Une borne illisible vaut 0.
    - organisations : liste séparée par des virgules, sans strip des éléments,
      chaque nom lié séparément dans un IN.
    """
    query = select(Student)

    if criteria.age_min and criteria.age_max:
        query = query.where(
            Student.age.between(
                parse_int_or_zero(criteria.age_min),
                parse_int_or_zero(criteria.age_max),
            )
        )

    if criteria.gpa_min and criteria.gpa_max:
        query = query.where(
            Student.gpa.between(
                parse_float_or_zero(criteria.gpa_min),
                parse_float_or_zero(criteria.gpa_max),
            )
        )

    if criteria.organizations:
        query = query.where(Student.organization_name.in_(criteria.organizations.split(",")))

    return query.order_by(Student.id)


def distinct_organizations_query() -> Select:
    return (
        select(Student.organization_name)
        .where(Student.organization_name != "")
        .distinct()
        .order_by(Student.organization_name)
    )
