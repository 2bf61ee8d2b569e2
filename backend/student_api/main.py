"""
Point d'entrée principal de l'API élèves.
Démarrage : uvicorn student_api.main:app --port 8080
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import student_api.models  # noqa: F401 — enregistre les modèles dans Base.metadata avant les routers
from student_api.config import settings
from student_api.database import engine
from student_api.errors import InputDecodeError, StudentApiError, StudentValidationError
from student_api.init_db import reset_schema
from student_api.routers import organizations, students

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : recrée le schéma au démarrage, libère le pool à l'arrêt."""
    if settings.RESET_SCHEMA_ON_STARTUP:
        reset_schema(engine)
    logger.info("API élèves démarrée (%s).", settings.ENV)
    yield
    engine.dispose()


app = FastAPI(
    title="Students API",
    description="API CRUD pour les élèves : recherche, filtres et insertion en masse",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS — le frontend tourne sur un autre port en développement
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)


app.include_router(students.router)
app.include_router(organizations.router)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _request_error(exc: RequestValidationError) -> StudentApiError:
    """Traduit une erreur de validation FastAPI en erreur métier (400)."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return InputDecodeError("Invalid JSON body")

    messages = []
    for err in errors:
        cause = (err.get("ctx") or {}).get("error")
        if isinstance(cause, StudentValidationError):
            messages.append(cause.message)
            continue
        if err.get("type") == "value_error":
            messages.append(str(err.get("msg", "")).removeprefix("Value error, "))
            continue
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query"))
        messages.append(f"{field or 'body'}: {err.get('msg')}")
    return StudentValidationError("; ".join(messages))


@app.exception_handler(StudentApiError)
async def student_api_error_handler(request: Request, exc: StudentApiError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps JSON illisible ou champ invalide → 400 (au lieu du 422 par défaut)."""
    error = _request_error(exc)
    logger.info("Requête rejetée %s %s : %s", request.method, request.url.path, error.message)
    return _error_response(error.status_code, error.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return _error_response(500, "Internal server error")


@app.get("/", response_class=PlainTextResponse, tags=["Santé"])
def liveness():
    """Vérifie que l'API est opérationnelle."""
    return "Backend API running"
