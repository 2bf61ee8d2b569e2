"""
Tests du service élèves contre une base SQLite en mémoire :
attribution des ids, transactions et rollback.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import literal, select

from student_api.errors import DatabaseError, NotFoundError
from student_api.models.student import Student
from student_api.schemas.student import StudentFilter, StudentIn
from student_api.services import student_service


# --- Helpers ---

def make_student_in(name="Anna", age=20, gpa=3.0, organization_name="Chess Club") -> StudentIn:
    return StudentIn(name=name, age=age, gpa=gpa, organization_name=organization_name)


def ids_in_table(db_session):
    db_session.expire_all()
    return [s.id for s in db_session.query(Student).order_by(Student.id)]


# ============================================================
# create_student
# ============================================================

def test_create_premier_id_vaut_1(db_session):
    assert student_service.create_student(db_session, make_student_in()) == 1


def test_create_id_max_plus_un(db_session, add_students):
    add_students((3, "A", 20, 3.0, "X"), (9, "B", 21, 3.0, "X"))

    assert student_service.create_student(db_session, make_student_in()) == 10


def test_create_persiste_valeurs_normalisees(db_session):
    student_id = student_service.create_student(
        db_session, make_student_in(name="  Joanna ", organization_name="")
    )
    stored = db_session.get(Student, student_id)
    assert stored.name == "Joanna"
    assert stored.organization_name == "No Organization"


def test_create_violation_contrainte_leve_database_error(db_session):
    """Une ligne contournant la validation est rejetée par la contrainte CHECK."""
    bad = StudentIn.model_construct(name="X", age=500, gpa=3.0, organization_name="A")

    with pytest.raises(DatabaseError):
        student_service.create_student(db_session, bad)
    assert ids_in_table(db_session) == []


# ============================================================
# update_student
# ============================================================

def test_update_remplace_tous_les_champs(db_session, add_students):
    add_students((1, "Anna", 20, 3.0, "Chess Club"))

    student_service.update_student(
        db_session, 1, make_student_in(name="Anna B", age=22, gpa=3.7, organization_name="Robotics")
    )

    db_session.expire_all()
    stored = db_session.get(Student, 1)
    assert (stored.name, stored.age, stored.gpa, stored.organization_name) == (
        "Anna B", 22, 3.7, "Robotics",
    )


def test_update_introuvable(db_session, add_students):
    add_students((1, "Anna", 20, 3.0, "Chess Club"))

    with pytest.raises(NotFoundError):
        student_service.update_student(db_session, 42, make_student_in(name="Ghost"))

    db_session.expire_all()
    assert db_session.get(Student, 1).name == "Anna"


def test_update_valeurs_avec_apostrophes(db_session, add_students):
    """Les valeurs sont liées : apostrophes et SQL sont stockés tels quels."""
    add_students((1, "Anna", 20, 3.0, "Chess Club"))
    name = "O'Brien'; DROP TABLE students; --"

    student_service.update_student(db_session, 1, make_student_in(name=name))

    db_session.expire_all()
    assert db_session.get(Student, 1).name == name


# ============================================================
# delete_student
# ============================================================

def test_delete_retourne_nombre_de_lignes(db_session, add_students):
    add_students((1, "Anna", 20, 3.0, "Chess Club"))

    assert student_service.delete_student(db_session, 1) == 1
    assert student_service.delete_student(db_session, 1) == 0


# ============================================================
# bulk_create_students
# ============================================================

def test_bulk_ids_sequentiels_dans_l_ordre(db_session, add_students):
    add_students((5, "Existing", 30, 2.0, "X"))
    batch = [make_student_in(name=n) for n in ("First", "Second", "Third")]

    assert student_service.bulk_create_students(db_session, batch) == 3

    db_session.expire_all()
    names = {s.id: s.name for s in db_session.query(Student)}
    assert names[6] == "First"
    assert names[7] == "Second"
    assert names[8] == "Third"


def test_bulk_table_vide_commence_a_1(db_session):
    student_service.bulk_create_students(db_session, [make_student_in(), make_student_in()])
    assert ids_in_table(db_session) == [1, 2]


def test_bulk_liste_vide(db_session):
    assert student_service.bulk_create_students(db_session, []) == 0
    assert ids_in_table(db_session) == []


def test_bulk_rollback_complet(db_session, add_students):
    """La ligne 2 sur 3 viole une contrainte → aucune ligne du lot n'est conservée."""
    add_students((1, "Existing", 30, 2.0, "X"))
    batch = [
        make_student_in(name="Ok 1"),
        StudentIn.model_construct(name="Bad", age=20, gpa=9.5, organization_name="X"),
        make_student_in(name="Ok 2"),
    ]

    with pytest.raises(DatabaseError):
        student_service.bulk_create_students(db_session, batch)

    assert ids_in_table(db_session) == [1]


# ============================================================
# Lectures
# ============================================================

def test_list_students_trie_par_id(db_session, add_students):
    add_students((2, "Bob", 20, 3.0, "X"), (1, "Anna", 20, 3.0, "X"))

    assert [s.id for s in student_service.list_students(db_session)] == [1, 2]


def test_filter_students_age(db_session, add_students):
    add_students((1, "A", 19, 3.0, "X"), (2, "B", 20, 3.0, "X"), (3, "C", 25, 3.0, "X"), (4, "D", 26, 3.0, "X"))

    result = student_service.filter_students(db_session, StudentFilter(age_min="20", age_max="25"))

    assert [s.id for s in result] == [2, 3]


def test_list_organizations_exclut_vide(db_session, add_students):
    add_students((1, "A", 20, 3.0, "Robotics"), (2, "B", 20, 3.0, ""), (3, "C", 20, 3.0, "Chess Club"),
                 (4, "D", 20, 3.0, "Robotics"))

    assert student_service.list_organizations(db_session) == ["Chess Club", "Robotics"]


# ============================================================
# Collision de clé primaire (id calculé périmé)
# ============================================================

def test_create_id_deja_pris_leve_database_error(db_session, add_students):
    """Un autre insert a pris l'id entre la lecture du max et l'INSERT → clé primaire violée."""
    add_students((1, "Anna", 20, 3.0, "Chess Club"))

    with patch.object(student_service.queries, "next_id_query", return_value=select(literal(1))):
        with pytest.raises(DatabaseError) as exc_info:
            student_service.create_student(db_session, make_student_in(name="Late"))

    assert "UNIQUE" in str(exc_info.value)
    db_session.expire_all()
    assert db_session.get(Student, 1).name == "Anna"
    assert ids_in_table(db_session) == [1]


def test_bulk_id_deja_pris_annule_tout_le_lot(db_session, add_students):
    """Max périmé : la ligne 2 du lot retombe sur un id existant, rien n'est conservé."""
    add_students((2, "Existing", 30, 2.0, "X"))
    batch = [make_student_in(name=n) for n in ("First", "Second", "Third")]

    with patch.object(student_service.queries, "max_id_query", return_value=select(literal(0))):
        with pytest.raises(DatabaseError):
            student_service.bulk_create_students(db_session, batch)

    assert ids_in_table(db_session) == [2]
