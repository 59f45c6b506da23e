"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) complète le schéma généré par FastAPI avec les conventions de l'API.
Les limites d'upload sont lues depuis la configuration de l'app et les allow-lists,
pour que la doc reste alignée sur ce qui est réellement accepté.
"""

from fastapi.openapi.utils import get_openapi

from app.utils.media_files import ALLOWED_EXTENSIONS


def _description(max_upload_mb: int) -> str:
    extensions = ", ".join(sorted(ext.lstrip(".") for ext in ALLOWED_EXTENSIONS))
    return (
        "Todo API with optional file attachments stored in an S3 bucket.\n\n"
        "### Conventions\n"
        "- All timestamps are UTC.\n"
        "- Creation is a multipart form (`title`, `description`, `file`).\n"
        f"- Attachments: {extensions}; {max_upload_mb} MB max.\n"
        "- Errors: `{\"detail\": ...}`; 400 invalid input, 404 unknown todo, "
        "503 database not configured, 504 database or storage timeout.\n"
    )


def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=_description(app.state.settings.MAX_UPLOAD_MB),
        routes=app.routes,
        tags=app.openapi_tags,
    )
    # openapi_schema["info"]["contact"] = {"name": "API team", "email": "api@example.com"}
    app.openapi_schema = openapi_schema
    return app.openapi_schema
