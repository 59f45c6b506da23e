from typing import Optional

import boto3
from botocore.client import Config as BotoConfig

from app.core.config import Settings


def make_s3_client(settings: Settings):
    cfg = BotoConfig(
        signature_version="s3v4",
        s3={"addressing_style": "path"},
        connect_timeout=settings.S3_TIMEOUT_SECONDS,
        read_timeout=settings.S3_TIMEOUT_SECONDS,
        retries={"max_attempts": settings.S3_MAX_ATTEMPTS, "mode": "standard"},
    )
    endpoint_url = str(settings.S3_ENDPOINT)
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        region_name=settings.S3_REGION,
        aws_access_key_id=settings.S3_KEY,
        aws_secret_access_key=settings.S3_SECRET,
        config=cfg,
        use_ssl=endpoint_url.startswith("https"),
    )


def public_url_for(key: str, *, endpoint: str, bucket: str, public_base: Optional[str] = None) -> str:
    """
    URL publique (objet en ACL public-read).
    Exemple:
      public_base="https://todos.sgp1.cdn.digitaloceanspaces.com" -> <public_base>/uploads/...
      sinon path-style -> <endpoint>/<bucket>/uploads/...
    """
    if public_base:
        return f"{public_base.rstrip('/')}/{key}"
    return f"{endpoint.rstrip('/')}/{bucket}/{key}"
