"""
➡️ But : Définir les formats d’entrée/sortie de l’API (couche validation).

TodoUpdate → corps JSON du PUT
TodoOut → réponse de l’API (miroir de la table, sans la clé de stockage)
MessageOut / HealthOut → réponses simples

La création passe par un formulaire multipart (title, description, file) : pas de schéma d’entrée.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TodoUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, examples=["Buy milk"])
    description: Optional[str] = Field(None, examples=["2% organic"])
    completed: bool = Field(False, examples=[True])


class TodoOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageOut(BaseModel):
    message: str


class HealthServices(BaseModel):
    database: str   # connected | unreachable | not configured
    storage: str    # configured | not configured


class HealthOut(BaseModel):
    status: str     # OK | DEGRADED
    timestamp: datetime
    services: HealthServices
