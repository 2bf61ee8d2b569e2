"""
Règles de validation des élèves, partagées par la création, la mise à jour
et l'insertion en masse.
"""

from typing import Optional

from student_api.errors import AgeOutOfRange, GpaOutOfRange

MIN_AGE = 0
MAX_AGE = 120
MIN_GPA = 0.0
MAX_GPA = 4.0
DEFAULT_ORGANIZATION = "No Organization"


def check_age(age: int) -> int:
    if not MIN_AGE <= age <= MAX_AGE:
        raise AgeOutOfRange("Age out of range")
    return age


def check_gpa(gpa: float) -> float:
    if not MIN_GPA <= gpa <= MAX_GPA:
        raise GpaOutOfRange("GPA out of range")
    return gpa


def normalize_name(name: str) -> str:
    return name.strip()


def normalize_organization(organization_name: Optional[str]) -> str:
    """Supprime les espaces ; une organisation vide devient DEFAULT_ORGANIZATION."""
    organization_name = (organization_name or "").strip()
    return organization_name or DEFAULT_ORGANIZATION
