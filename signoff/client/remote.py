"""Thin request mapping onto the collection API.

Every call is a single attempt. Transport errors, non-2xx responses and
undecodable bodies are logged and reported as ``None`` / ``False``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

if TYPE_CHECKING:
    from signoff.client.sync import CollectionDescriptor

logger = logging.getLogger(__name__)


def auth_headers(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


@dataclass(frozen=True)
class RoleInfo:
    role: str
    locked: bool


class RemoteCollection:
    def __init__(self, http: httpx.AsyncClient, descriptor: CollectionDescriptor):
        self.http = http
        self.descriptor = descriptor

    async def fetch(self, token: str | None) -> list | None:
        name = self.descriptor.name
        try:
            response = await self.http.get(
                self.descriptor.endpoint, headers=auth_headers(token)
            )
        except httpx.HTTPError as exc:
            logger.warning("Fetch of %s failed: %s", name, exc)
            return None
        if not response.is_success:
            logger.warning("Fetch of %s returned HTTP %s", name, response.status_code)
            return None
        try:
            body: Any = response.json()
        except ValueError:
            logger.warning("Fetch of %s returned an undecodable body", name)
            return None
        if isinstance(body, dict) and self.descriptor.envelope in body:
            body = body[self.descriptor.envelope]
        return self.descriptor.normalizer(body)

    async def save(self, records: list, token: str | None) -> bool:
        if not records:
            return True
        name = self.descriptor.name
        payload = {self.descriptor.envelope: [record.to_dict() for record in records]}
        try:
            response = await self.http.post(
                self.descriptor.endpoint, json=payload, headers=auth_headers(token)
            )
        except httpx.HTTPError as exc:
            logger.warning("Save of %s failed: %s", name, exc)
            return False
        if not response.is_success:
            logger.warning("Save of %s returned HTTP %s", name, response.status_code)
            return False
        return True

    async def delete_one(self, record_id: str, token: str | None) -> bool:
        name = self.descriptor.name
        url = f"{self.descriptor.endpoint}/{quote(record_id, safe='')}"
        try:
            response = await self.http.delete(url, headers=auth_headers(token))
        except httpx.HTTPError as exc:
            logger.warning("Delete of %s %s failed: %s", name, record_id, exc)
            return False
        if not response.is_success:
            logger.warning(
                "Delete of %s %s returned HTTP %s", name, record_id, response.status_code
            )
            return False
        return True


async def fetch_role(http: httpx.AsyncClient, token: str | None) -> RoleInfo | None:
    try:
        response = await http.get("/api/role", headers=auth_headers(token))
    except httpx.HTTPError as exc:
        logger.warning("Role fetch failed: %s", exc)
        return None
    if not response.is_success:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict) or body.get("role") not in ("creator", "reviewer"):
        return None
    return RoleInfo(role=body["role"], locked=bool(body.get("locked")))
