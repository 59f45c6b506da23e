"""
➡️ But : Centraliser tous les paramètres configurables (nom d’app, base, stockage S3, limites d’upload…)

Utilise pydantic-settings pour charger automatiquement les variables d’environnement (.env, variables système…).

Fournit un objet Settings construit une seule fois, que l’on passe ensuite à create_app() :

from app.core.config import get_settings
print(get_settings().APP_NAME)

La base et le stockage sont optionnels : sans DATABASE_URL / S3_*, l’API démarre
quand même et répond 503 sur les endpoints concernés.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Todo-Attachments"
    ENV: str = "dev"  # dev | prod | test
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    # DATABASE_URL prioritaire ; sinon SQLITE_PATH construit une URL sqlite.
    DATABASE_URL: Optional[str] = None
    SQLITE_PATH: Optional[str] = None
    DB_TIMEOUT_SECONDS: int = 10

    # -----------------------------
    # Stockage S3 (DigitalOcean Spaces, MinIO…)
    # -----------------------------
    S3_ENDPOINT: Optional[str] = Field(default=None, validation_alias=AliasChoices("S3_ENDPOINT", "SPACES_ENDPOINT"))
    S3_KEY: Optional[str] = Field(default=None, validation_alias=AliasChoices("S3_KEY", "SPACES_KEY"))
    S3_SECRET: Optional[str] = Field(default=None, validation_alias=AliasChoices("S3_SECRET", "SPACES_SECRET"))
    S3_BUCKET: Optional[str] = Field(default=None, validation_alias=AliasChoices("S3_BUCKET", "SPACES_BUCKET"))
    S3_REGION: str = Field(default="sgp1", validation_alias=AliasChoices("S3_REGION", "SPACES_REGION"))
    S3_PUBLIC_URL: Optional[str] = None   # ex: https://bucket.sgp1.digitaloceanspaces.com
    S3_TIMEOUT_SECONDS: int = 10
    S3_MAX_ATTEMPTS: int = 2

    # -----------------------------
    # Uploads
    # -----------------------------
    UPLOAD_PREFIX: str = "uploads"
    MAX_UPLOAD_MB: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si fourni
        if not self.DATABASE_URL and self.SQLITE_PATH:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

        # Endpoint sans schéma (ex: "sgp1.digitaloceanspaces.com") -> https
        if self.S3_ENDPOINT and "://" not in self.S3_ENDPOINT:
            object.__setattr__(self, "S3_ENDPOINT", f"https://{self.S3_ENDPOINT}")

    @property
    def database_configured(self) -> bool:
        return bool(self.DATABASE_URL)

    @property
    def storage_configured(self) -> bool:
        return all([self.S3_ENDPOINT, self.S3_KEY, self.S3_SECRET, self.S3_BUCKET])

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Instance unique, construite au premier appel."""
    return Settings()
