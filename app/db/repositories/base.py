from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.exc import DBAPIError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlmodel import SQLModel, Session

from app.core.errors import StorageTimeout, StoreUnavailable

# Type générique pour le modèle (Todo, ...)
ModelT = TypeVar("ModelT", bound=SQLModel)

# Messages des drivers (psycopg2, sqlite3) signalant un délai dépassé
_TIMEOUT_MARKERS = (
    "statement timeout",
    "canceling statement",
    "timeout expired",
    "database is locked",
)


def _is_timeout(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    message = str(getattr(exc, "orig", exc)).lower()
    return any(marker in message for marker in _TIMEOUT_MARKERS)


class BaseRepository(Generic[ModelT]):
    """
    Repository de base : persistance générique d'une table, une ligne à la fois.

    👉 Ne contient aucune logique métier.
    👉 Chaque écriture = un commit (pas de transaction multi-lignes).
    👉 Les erreurs SQLAlchemy sont traduites : timeout -> StorageTimeout,
       connexion perdue -> StoreUnavailable, le reste remonte tel quel.
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            if _is_timeout(e):
                raise StorageTimeout("database") from e
            if isinstance(e, DBAPIError) and e.connection_invalidated:
                raise StoreUnavailable("database") from e
            raise

    # ---------- SCHEMA ----------

    def initialize(self) -> None:
        """Crée la table du modèle si elle n'existe pas (idempotent)."""
        with self._guard():
            SQLModel.metadata.create_all(self.session.get_bind(), tables=[self.model.__table__])

    # ---------- READ ----------

    def find(self, id_: Any) -> Optional[ModelT]:
        """Retourne un enregistrement par son identifiant, ou None."""
        with self._guard():
            return self.session.get(self.model, id_)

    # ---------- CREATE ----------

    def add(self, **fields) -> ModelT:
        """Crée et persiste un nouvel enregistrement (id et timestamps générés)."""
        entity = self.model(**fields)
        with self._guard():
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
        return entity

    # ---------- UPDATE ----------

    def save(self, entity: ModelT, **changes) -> ModelT:
        """Applique les changements et persiste l'enregistrement."""
        for key, value in changes.items():
            setattr(entity, key, value)
        with self._guard():
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
        return entity

    # ---------- DELETE ----------

    def remove(self, id_: Any) -> bool:
        """
        Supprime par identifiant en une seule requête DELETE.
        Retourne False si aucune ligne ne correspondait (déjà supprimée, ex: requête concurrente).
        """
        statement = delete(self.model).where(self.model.id == id_)
        with self._guard():
            result = self.session.exec(statement)
            self.session.commit()
        return result.rowcount > 0
