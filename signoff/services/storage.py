import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from signoff.config import settings

logger = logging.getLogger(__name__)


class StorageService:
    """Object store holding uploaded asset media (R2, S3 compatible)."""

    @staticmethod
    def is_configured() -> bool:
        return bool(
            settings.r2_endpoint
            and settings.r2_access_key_id
            and settings.r2_secret_access_key
            and settings.r2_bucket
        )

    @staticmethod
    def _get_client():  # type: ignore[return]
        if not StorageService.is_configured():
            raise RuntimeError(
                "R2 storage is not configured. Set R2_ENDPOINT, "
                "R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY and R2_BUCKET."
            )
        return boto3.client(
            "s3",
            endpoint_url=settings.r2_endpoint,
            aws_access_key_id=settings.r2_access_key_id,
            aws_secret_access_key=settings.r2_secret_access_key,
            region_name="auto",
            config=Config(signature_version="s3v4"),
        )

    @staticmethod
    def extract_key(media_url: str | None) -> str | None:
        """Return the bucket key for a URL under the public base, else None."""
        if not media_url or not settings.r2_public_base_url:
            return None
        base = settings.r2_public_base_url.rstrip("/")
        if not media_url.startswith(base):
            return None
        return media_url[len(base) :].lstrip("/") or None

    @staticmethod
    def delete_media(media_url: str | None) -> bool:
        """Best-effort removal of the object behind ``media_url``."""
        key = StorageService.extract_key(media_url)
        if not key or not StorageService.is_configured():
            return False
        try:
            StorageService._get_client().delete_object(
                Bucket=settings.r2_bucket, Key=key
            )
        except (BotoCoreError, ClientError):
            logger.warning("R2 delete failed for key %s", key, exc_info=True)
            return False
        logger.info("Deleted R2 object %s", key)
        return True


storage = StorageService()
