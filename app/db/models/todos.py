from typing import Optional
from sqlmodel import Field

from .base import BaseModelDB


class Todo(BaseModelDB, table=True):
    """Tâche, avec au plus une pièce jointe stockée dans le bucket S3."""

    __tablename__ = "todos"
    # Sans AUTOINCREMENT, SQLite réutilise le plus grand id supprimé
    __table_args__ = {"sqlite_autoincrement": True}

    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    completed: bool = Field(default=False, nullable=False)

    # Pièce jointe : les trois champs sont renseignés ensemble ou pas du tout
    file_url: Optional[str] = Field(default=None, max_length=500, description="URL publique de l'objet")
    file_name: Optional[str] = Field(default=None, max_length=255, description="Nom d'origine du fichier")
    file_key: Optional[str] = Field(default=None, max_length=500, description="Chemin de l'objet dans le bucket")
