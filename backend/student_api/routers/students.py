"""
Router pour les élèves.
CRUD, recherche par nom, filtres et insertion en masse.

Les routes littérales (search, filter, bulk) sont déclarées avant les
routes paramétrées /{student_id}.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from student_api.database import get_db
from student_api.schemas.student import (
    BulkInsertResult,
    MessageResponse,
    StudentCreated,
    StudentDeleted,
    StudentFilter,
    StudentIn,
    StudentResponse,
)
from student_api.services import student_service

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/search", response_model=List[StudentResponse], summary="Rechercher par nom")
def search_students(q: str = "", db: Session = Depends(get_db)):
    """Élèves dont le nom contient `q`."""
    return student_service.search_students(db, q)


@router.get("/filter", response_model=List[StudentResponse], summary="Filtrer les élèves")
def filter_students(
    age_min: Optional[str] = Query(None, alias="ageMin"),
    age_max: Optional[str] = Query(None, alias="ageMax"),
    gpa_min: Optional[str] = Query(None, alias="gpaMin"),
    gpa_max: Optional[str] = Query(None, alias="gpaMax"),
    organizations: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Filtre par plage d'âge, plage de GPA (bornes incluses) et liste
    d'organisations séparées par des virgules. Chaque critère est optionnel.
    """
    criteria = StudentFilter(
        age_min=age_min,
        age_max=age_max,
        gpa_min=gpa_min,
        gpa_max=gpa_max,
        organizations=organizations,
    )
    return student_service.filter_students(db, criteria)


@router.post("/bulk", response_model=BulkInsertResult, status_code=201, summary="Insertion en masse")
def bulk_create_students(data: List[StudentIn], db: Session = Depends(get_db)):
    """
    Insère une liste d'élèves en une transaction.
    Une ligne invalide rejette tout le lot (400) ; rien n'est écrit.
    """
    count = student_service.bulk_create_students(db, data)
    return BulkInsertResult(message="Bulk insert successful", count=count)


@router.get("", response_model=List[StudentResponse], summary="Lister tous les élèves")
def list_students(db: Session = Depends(get_db)):
    return student_service.list_students(db)


@router.post("", response_model=StudentCreated, status_code=201, summary="Créer un élève")
def create_student(data: StudentIn, db: Session = Depends(get_db)):
    """Crée un élève ; l'id attribué est max(id) + 1."""
    student_id = student_service.create_student(db, data)
    return StudentCreated(id=student_id, message="Student created successfully")


@router.put("/{student_id}", response_model=MessageResponse, summary="Modifier un élève")
def update_student(student_id: int, data: StudentIn, db: Session = Depends(get_db)):
    """Remplace tous les champs d'un élève existant (404 si introuvable)."""
    student_service.update_student(db, student_id, data)
    return MessageResponse(message="Student updated successfully")


@router.delete("/{student_id}", response_model=StudentDeleted, summary="Supprimer un élève")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    """
    Supprime un élève. Un id inconnu renvoie aussi 200 (deleted = 0) :
    contrairement à la mise à jour, aucun contrôle d'existence n'est fait.
    """
    deleted = student_service.delete_student(db, student_id)
    return StudentDeleted(message="Student deleted successfully", deleted=deleted)
