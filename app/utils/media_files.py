import hashlib
import os
import re
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Set

import filetype
from fastapi import UploadFile

from app.core.errors import ValidationError


# Allow-lists : images, PDF et texte
ALLOWED_EXTENSIONS: Set[str] = {".jpeg", ".jpg", ".png", ".gif", ".pdf", ".txt"}

ALLOWED_MIME: Set[str] = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "text/plain",
}

MAX_FILENAME_LENGTH = 255

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class IncomingFile:
    data: bytes
    filename: str
    content_type: str


def detect_mime(file_bytes: bytes) -> Optional[str]:
    """
    Détecte le type réel via 'filetype'.
    None si non reconnu (ex: texte brut, que filetype ne sait pas identifier).
    """
    kind = filetype.guess(file_bytes)
    return kind.mime if kind else None


def validate_file(file_bytes: bytes, *, filename: str, content_type: str, max_bytes: int) -> None:
    """
    Lève ValueError si le fichier est vide, trop gros, ou d'un type non autorisé.
    Le type déclaré ET l'extension doivent être dans les allow-lists ; si le
    contenu est reconnaissable, son type réel aussi.
    """
    size = len(file_bytes)
    if size == 0:
        raise ValueError("Empty file")
    if size > max_bytes:
        raise ValueError(f"File too large (max {max_bytes // (1024 * 1024)} MB)")

    if len(filename) > MAX_FILENAME_LENGTH:
        raise ValueError(f"File name too long (max {MAX_FILENAME_LENGTH} characters)")

    ext = os.path.splitext(filename)[1].lower()
    declared = (content_type or "").split(";")[0].strip().lower()
    if ext not in ALLOWED_EXTENSIONS or declared not in ALLOWED_MIME:
        raise ValueError("Only images, PDFs, and text files are allowed")

    real_mime = detect_mime(file_bytes)
    if real_mime is not None and real_mime not in ALLOWED_MIME:
        raise ValueError(f"File content not allowed: {real_mime}")


@asynccontextmanager
async def read_upload(file: UploadFile, *, max_bytes: int) -> AsyncIterator[IncomingFile]:
    """
    Lit le fichier uploadé (au plus max_bytes + 1 octets), le valide et le fournit.
    Fichier refusé -> ValidationError (400) avant tout appel au service.
    Le tampon temporaire est fermé à la sortie, que l'upload réussisse ou non.
    """
    try:
        raw = await file.read(max_bytes + 1)
        filename = os.path.basename(file.filename or "")
        content_type = file.content_type or "application/octet-stream"
        try:
            validate_file(raw, filename=filename, content_type=content_type, max_bytes=max_bytes)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        yield IncomingFile(data=raw, filename=filename, content_type=content_type)
    finally:
        await file.close()


def safe_filename(original_name: str) -> str:
    """Nom ASCII sans chemin ; le nom et l'extension sont nettoyés séparément."""
    stem, ext = os.path.splitext(os.path.basename(original_name))
    stem = _UNSAFE_CHARS.sub("_", stem).strip("._") or "file"
    ext = _UNSAFE_CHARS.sub("", ext)
    return f"{stem}{ext}"


def build_object_key(*, prefix: str, original_name: str, now_ns: Optional[int] = None) -> str:
    """
    Construit une clé lisible : <prefix>/<timestamp µs>-<nom d'origine nettoyé>.
    Exemple:
      prefix="uploads" -> uploads/1735725600123456-facture.pdf
      nom modifié par le nettoyage -> uploads/1735725600123456-r_sum_-3f2a9c1d.pdf
    Le suffixe (hash du nom d'origine) garde des clés distinctes pour des noms distincts.
    Deux uploads du même nom dans la même microseconde partagent la clé (le dernier écrase).
    """
    stamp = (now_ns if now_ns is not None else time.time_ns()) // 1000
    name = os.path.basename(original_name)
    safe = safe_filename(name)
    if safe != name:
        stem, ext = os.path.splitext(safe)
        digest = hashlib.sha256(name.encode("utf-8")).hexdigest()[:8]
        safe = f"{stem}-{digest}{ext}"
    return f"{prefix.strip('/')}/{stamp}-{safe}"
