# Importe les modèles pour enregistrer leurs tables dans Base.metadata
# avant create_all / drop_all (voir init_db.py).

from student_api.models.student import Student  # noqa: F401
