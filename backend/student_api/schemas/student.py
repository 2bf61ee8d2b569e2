"""
Schémas Pydantic pour les élèves.
Les validateurs délèguent aux règles de services/validation.py.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from student_api.services.validation import (
    check_age,
    check_gpa,
    normalize_name,
    normalize_organization,
)


class StudentIn(BaseModel):
    """
    Corps de création / mise à jour complète d'un élève (aussi une ligne du bulk).
    Un champ absent prend sa valeur zéro ("", 0, 0.0) puis passe par les mêmes règles.
    """
    name: str = Field(default="", validate_default=True)
    age: int = Field(default=0, validate_default=True)
    gpa: float = Field(default=0.0, validate_default=True)
    organization_name: str = Field(default="", validate_default=True)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return normalize_name(v)

    @field_validator("age")
    @classmethod
    def age_in_range(cls, v: int) -> int:
        return check_age(v)

    @field_validator("gpa")
    @classmethod
    def gpa_in_range(cls, v: float) -> float:
        return check_gpa(v)

    @field_validator("organization_name", mode="before")
    @classmethod
    def default_organization(cls, v):
        # Les types invalides sont laissés à la validation pydantic
        if v is None or isinstance(v, str):
            return normalize_organization(v)
        return v


class StudentResponse(BaseModel):
    id: int
    name: str
    age: int
    gpa: float
    organization_name: str

    model_config = {"from_attributes": True}


class StudentCreated(BaseModel):
    id: int
    message: str


class MessageResponse(BaseModel):
    message: str


class StudentDeleted(BaseModel):
    message: str
    deleted: int


class BulkInsertResult(BaseModel):
    message: str
    count: int


class StudentFilter(BaseModel):
    """
    Critères de filtrage optionnels, tels que reçus dans la query string.
    Une plage n'est appliquée que si ses deux bornes sont présentes et non vides.
    """
    age_min: Optional[str] = None
    age_max: Optional[str] = None
    gpa_min: Optional[str] = None
    gpa_max: Optional[str] = None
    organizations: Optional[str] = None
