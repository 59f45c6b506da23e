import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure le logger racine une seule fois (uvicorn garde ses propres handlers)."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
    # Les requêtes SQL ne sont loguées qu'en debug
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
