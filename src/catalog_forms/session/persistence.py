"""Persistence collaborator: create and partially update catalog entities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

import httpx

from ..exceptions import PersistenceError
from .persistence_errors import AccessDenied, Conflict, NotFound, ServerFailure, ValidationFailed

logger = logging.getLogger(__name__)


class PersistenceService(Protocol):
    async def create(self, entity: Mapping[str, Any]) -> dict[str, Any]:
        ...

    async def update(self, entity_id: str, partial: Mapping[str, Any]) -> dict[str, Any]:
        ...


_STATUS_ERRORS: dict[int, type[PersistenceError]] = {
    400: ValidationFailed,
    401: AccessDenied,
    403: AccessDenied,
    404: NotFound,
    409: Conflict,
    422: ValidationFailed,
}


@dataclass(slots=True)
class HttpPersistenceService:
    """JSON REST adapter: ``POST <resource>`` and ``PATCH <resource>/<id>``.

    Responses are expected either bare or wrapped as ``{"data": {...}}``;
    the entity dictionary is returned in both cases.
    """

    base_url: str
    resource: str
    token: str | None = None
    timeout_seconds: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def collection_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.resource.strip('/')}"

    async def create(self, entity: Mapping[str, Any]) -> dict[str, Any]:
        return await self._send("POST", self.collection_url, entity)

    async def update(self, entity_id: str, partial: Mapping[str, Any]) -> dict[str, Any]:
        return await self._send("PATCH", f"{self.collection_url}/{entity_id}", partial)

    async def _send(self, method: str, url: str, body: Mapping[str, Any]) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.request(method, url, json=dict(body), headers=headers)
        except httpx.HTTPError as exc:
            self.log.error(
                "session.persistence.transport_failed",
                extra={"method": method, "url": url},
                exc_info=exc,
            )
            raise ServerFailure(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            error_cls = _STATUS_ERRORS.get(response.status_code)
            if error_cls is None:
                error_cls = ServerFailure if response.status_code >= 500 else ValidationFailed
            message = _error_message(response)
            self.log.warning(
                "session.persistence.rejected",
                extra={
                    "method": method,
                    "url": url,
                    "status_code": response.status_code,
                    "category": error_cls.category,
                },
            )
            raise error_cls(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError:
            return {}
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            return payload["data"]
        return payload if isinstance(payload, dict) else {}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"request failed with status {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return f"request failed with status {response.status_code}"


__all__ = ["HttpPersistenceService", "PersistenceService"]
