"""
Router pour les organisations (valeurs distinctes de students.organization_name).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_api.database import get_db
from student_api.services import student_service

router = APIRouter(prefix="/organizations", tags=["Organizations"])


@router.get("", response_model=List[str], summary="Lister les organisations")
def list_organizations(db: Session = Depends(get_db)):
    """Noms d'organisation distincts, triés, sans la chaîne vide."""
    return student_service.list_organizations(db)
