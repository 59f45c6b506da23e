"""
➡️ But : Définir les erreurs métier et leur traduction en réponses HTTP.

Les services lèvent ces exceptions (jamais d'HTTPException) ;
register_exception_handlers() les convertit en codes HTTP au niveau de l'app.

ValidationError   -> 400
NotFound          -> 404
UploadError/DeleteError -> absorbées par le service (502 si jamais elles remontent)
StoreUnavailable  -> 503
StorageTimeout    -> 504
Tout le reste     -> 500, détail uniquement dans les logs.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TodoAppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(TodoAppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(TodoAppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Todo not found"):
        super().__init__(message)


class UploadError(TodoAppError):
    status_code = status.HTTP_502_BAD_GATEWAY


class DeleteError(TodoAppError):
    status_code = status.HTTP_502_BAD_GATEWAY


class StoreUnavailable(TodoAppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, service: str):
        super().__init__(f"{service.capitalize()} service unavailable")
        self.service = service


class StorageTimeout(TodoAppError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, service: str):
        super().__init__(f"{service.capitalize()} request timed out")
        self.service = service


async def _app_error_handler(request: Request, exc: TodoAppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Entrée client invalide (JSON mal formé, id non entier…) -> 400 comme ValidationError
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoAppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
