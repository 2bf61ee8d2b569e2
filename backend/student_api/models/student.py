"""
Modèle SQLAlchemy pour la table students.
L'id n'est pas généré par la base : il est calculé à l'insertion (max(id) + 1).
"""

from sqlalchemy import BigInteger, CheckConstraint, Column, Float, Index, Integer, Text

from student_api.database import Base


class Student(Base):
    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("age BETWEEN 0 AND 120", name="ck_students_age_range"),
        CheckConstraint("gpa BETWEEN 0.0 AND 4.0", name="ck_students_gpa_range"),
        Index("idx_students_org", "organization_name"),
        Index("idx_students_age_gpa", "age", "gpa"),
        Index("idx_students_name", "name"),
    )

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(Text, nullable=False)
    age = Column(Integer, nullable=False)
    gpa = Column(Float, nullable=False)
    organization_name = Column(Text, nullable=False)
