"""
➡️ But : Définir les endpoints /api/todos.

C’est la couche la plus proche du web :

Réceptionne les requêtes HTTP (GET, POST multipart, PUT JSON, DELETE)

Valide le fichier uploadé (taille, type) avant d'appeler le service

Retourne les schémas de sortie (response_model)

Les routes ne contiennent ni SQL ni logique métier ; les erreurs métier sont traduites par l'app.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.api.dependencies import get_settings_dep, get_todo_service
from app.core.config import Settings
from app.features.todos.schemas import MessageOut, TodoOut, TodoUpdate
from app.features.todos.services import TodoService
from app.utils.media_files import read_upload

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
    responses={
        404: {"description": "Todo not found"},
        503: {"description": "Database not configured or unreachable"},
    },
)

TODO_EXAMPLE = {
    "id": 1,
    "title": "Buy milk",
    "description": "2%",
    "completed": False,
    "file_url": None,
    "file_name": None,
    "created_at": "2025-01-01T10:00:00",
    "updated_at": "2025-01-01T10:00:00",
}


@router.get(
    "",
    summary="List todos",
    description="Every todo, newest first.",
    response_model=List[TodoOut],
    responses={200: {"content": {"application/json": {"example": [TODO_EXAMPLE]}}}},
)
def list_todos(svc: TodoService = Depends(get_todo_service)):
    return svc.list()


@router.post(
    "",
    summary="Create a todo",
    description="Multipart form. The optional file is uploaded to the bucket; "
                "if the upload fails the todo is still created, without attachment.",
    status_code=status.HTTP_201_CREATED,
    response_model=TodoOut,
    responses={400: {"description": "Missing title or rejected file"}},
)
async def create_todo(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings_dep),
    svc: TodoService = Depends(get_todo_service),
):
    # Certains clients envoient un champ fichier vide quand rien n'est choisi
    if file is None or not file.filename:
        return await svc.create(title, description)

    async with read_upload(file, max_bytes=settings.max_upload_bytes) as incoming:
        return await svc.create(title, description, incoming)


@router.get(
    "/{todo_id}",
    summary="Get a todo",
    response_model=TodoOut,
)
def get_todo(todo_id: int, svc: TodoService = Depends(get_todo_service)):
    return svc.get(todo_id)


@router.put(
    "/{todo_id}",
    summary="Update a todo",
    description="Replaces title, description and completed. Attachments cannot be changed.",
    response_model=TodoOut,
)
def update_todo(todo_id: int, payload: TodoUpdate, svc: TodoService = Depends(get_todo_service)):
    return svc.update(
        todo_id,
        title=payload.title,
        description=payload.description,
        completed=payload.completed,
    )


@router.delete(
    "/{todo_id}",
    summary="Delete a todo",
    description="Removes the attachment from the bucket (best effort), then the todo.",
    response_model=MessageOut,
)
def delete_todo(todo_id: int, svc: TodoService = Depends(get_todo_service)):
    return svc.delete(todo_id)
