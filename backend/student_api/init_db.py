"""
Initialisation du schéma : supprime puis recrée la table students et ses index.

Appelé au démarrage de l'API (lifespan). Aucune donnée n'est conservée
d'un démarrage à l'autre. Exécutable directement :
    python -m student_api.init_db
"""

import logging

from sqlalchemy.engine import Engine

import student_api.models  # noqa: F401 — enregistre les modèles dans Base.metadata
from student_api.database import Base, engine

logger = logging.getLogger(__name__)


def reset_schema(bind: Engine = engine) -> None:
    """Supprime la table students (si elle existe) puis la recrée avec ses index."""
    Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    logger.info("Schéma réinitialisé : tables %s", ", ".join(Base.metadata.tables))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_schema()
