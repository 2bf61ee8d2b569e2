"""
Erreurs métier de l'API élèves.

Chaque erreur porte le code HTTP renvoyé au client ; les handlers
enregistrés dans main.py les rendent sous la forme {"error": "<message>"}.
"""


class StudentApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputDecodeError(StudentApiError):
    """Corps de requête JSON illisible."""
    status_code = 400


class StudentValidationError(StudentApiError, ValueError):
    """Champ hors contraintes. Hérite de ValueError pour être reconnu par pydantic."""
    status_code = 400


class AgeOutOfRange(StudentValidationError):
    pass


class GpaOutOfRange(StudentValidationError):
    pass


class NotFoundError(StudentApiError):
    status_code = 404


class DatabaseError(StudentApiError):
    """Échec remonté par la couche de persistance (message brut du driver)."""
    status_code = 500
