import logging

import httpx

from signoff.client.errors import UploadError
from signoff.client.remote import auth_headers

logger = logging.getLogger(__name__)

PRESIGN_ENDPOINT = "/api/r2/presign"


def build_public_url(base_url: str, key: str) -> str:
    if not base_url:
        return ""
    return f"{base_url.rstrip('/')}/{key}"


class ObjectStoreUploader:
    """Presign-then-PUT upload of raw media bytes.

    Returns the public URL stored on the asset. Every failure surfaces as
    :class:`UploadError` so callers can skip the file and keep going.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        public_base_url: str = "",
        presign_url: str = PRESIGN_ENDPOINT,
    ):
        self.http = http
        self.public_base_url = public_base_url
        self.presign_url = presign_url or PRESIGN_ENDPOINT

    async def upload(
        self,
        file_name: str,
        content_type: str,
        data: bytes,
        event_id: str,
        token: str | None,
    ) -> str:
        try:
            response = await self.http.post(
                self.presign_url,
                json={"fileName": file_name, "fileType": content_type, "eventId": event_id},
                headers=auth_headers(token),
            )
        except httpx.HTTPError as exc:
            raise UploadError("Unable to prepare upload.") from exc
        if not response.is_success:
            raise UploadError("Unable to prepare upload.")
        try:
            payload = response.json()
        except ValueError as exc:
            raise UploadError("Unable to prepare upload.") from exc
        if not isinstance(payload, dict):
            raise UploadError("Unable to prepare upload.")

        upload_url = payload.get("url") or payload.get("uploadUrl")
        if not upload_url:
            raise UploadError("Missing upload URL.")

        try:
            put = await self.http.put(
                upload_url, content=data, headers={"Content-Type": content_type}
            )
        except httpx.HTTPError as exc:
            raise UploadError("Upload failed.") from exc
        if not put.is_success:
            raise UploadError("Upload failed.")

        key = payload.get("key") or ""
        public_url = payload.get("publicUrl") or (
            build_public_url(self.public_base_url, key) if key else ""
        )
        if not public_url:
            raise UploadError("Missing public asset URL.")
        logger.info("Uploaded %s (%d bytes)", file_name, len(data))
        return public_url
