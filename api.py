# api.py

#============================================================#
#                       Taskdesk-PM                          #
#============================================================#
# Created     : 2026-10-19                                   #
# Version     : V1.0.0                                       #
#------------------------------------------------------------#
# Purpose     : Typed gateway to the Taskdesk REST API:      #
#               teams, projects, tasks, users and the        #
#               assistant chat endpoint (httpx powered)      #
#============================================================#


from __future__ import annotations

import logging
import math
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from errors import (
    GatewayError, NotFoundError, SessionClosedError, TransportError,
    UnexpectedError, ValidationError,
)
from models import ENTITY_MODELS, ChatRequest, ChatResponse, EntityKind, Page
from models.base import ApiModel
from utils.retry import RetryPolicy

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=ApiModel)

DEFAULT_TIMEOUT = 30.0


# ---- session ----
class SessionContext:
    """Credentials and connection settings for one signed-in operator.

    Built once at sign-in and handed to every gateway. ``close()`` is the
    logout: afterwards every gateway call fails with SessionClosedError.
    """

    def __init__(self, base_url: str, token: str, user: Optional[Dict[str, Any]] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        if not token:
            raise ValueError("A bearer token is required to open a session")
        self.base_url = base_url.rstrip("/")
        self.user = user or {}
        self.timeout = timeout
        self._token: Optional[str] = token
        self._transport = transport

    @property
    def is_active(self) -> bool:
        return self._token is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.get("id")

    def headers(self) -> Dict[str, str]:
        if self._token is None:
            raise SessionClosedError("Session has been closed; sign in again")
        return {"Authorization": f"Bearer {self._token}", "Accept": "application/json"}

    def client(self) -> httpx.AsyncClient:
        # one client per call: each Streamlit rerun runs its own event loop
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    def close(self) -> None:
        self._token = None
        self.user = {}


# ---- helpers ----
def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail") or body.get("error")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return fallback


def _translate_status(response: httpx.Response, label: str) -> GatewayError:
    code = response.status_code
    if code == 404:
        return NotFoundError(_error_message(response, f"{label}: not found"), status_code=code)
    if 400 <= code < 500:
        return ValidationError(
            _error_message(response, f"{label}: request rejected ({code})"), status_code=code
        )
    return UnexpectedError(_error_message(response, f"{label}: server error ({code})"), status_code=code)


def _dump(payload: Union[ApiModel, Dict[str, Any]], partial: bool) -> Dict[str, Any]:
    if isinstance(payload, dict):
        return payload
    if partial:
        return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


class _Gateway:
    def __init__(self, session: SessionContext, retry: Optional[RetryPolicy] = None):
        self.session = session
        self.retry = retry or RetryPolicy()

    async def _send(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                    json: Optional[Dict[str, Any]] = None, idempotent: bool = False) -> Any:
        label = f"{method} {path}"

        async def call() -> httpx.Response:
            async with self.session.client() as client:
                response = await client.request(method, path, params=params, json=json)
                response.raise_for_status()
                return response

        try:
            if idempotent:
                response = await self.retry.run(call, label)
            else:
                response = await call()
        except GatewayError:
            raise
        except httpx.HTTPStatusError as e:
            raise _translate_status(e.response, label) from e
        except (httpx.TimeoutException, httpx.TransportError) as e:
            raise TransportError(f"Could not reach the API ({e.__class__.__name__})", request=label) from e
        except httpx.HTTPError as e:
            raise UnexpectedError(f"{label} failed: {e}", request=label) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UnexpectedError(f"{label}: response is not valid JSON", request=label) from e

    @staticmethod
    def _parse(model: Type[E], body: Any) -> E:
        try:
            return model.model_validate(body)
        except PydanticValidationError as e:
            raise UnexpectedError(f"Unexpected {model.__name__} payload from the API", detail=str(e)) from e


# ---- entity gateway ----
class EntityGateway(_Gateway, Generic[E]):
    """Stateless request/response boundary for one entity kind."""

    def __init__(self, session: SessionContext, kind: EntityKind, retry: Optional[RetryPolicy] = None):
        super().__init__(session, retry)
        self.kind = EntityKind(kind)
        self.model: Type[E] = ENTITY_MODELS[self.kind]
        self.path = f"/{self.kind.value}"

    async def list(self, page: Optional[int] = None, limit: Optional[int] = None,
                   search: Optional[str] = None) -> Page[E]:
        params: Dict[str, Any] = {}
        if page:
            params["page"] = page
        if limit:
            params["limit"] = limit
        if search:
            params["search"] = search
        body = await self._send("GET", self.path, params=params, idempotent=True)

        # some deployments answer with a bare array instead of the envelope
        if isinstance(body, list):
            items = [self._parse(self.model, row) for row in body]
            return Page(items=items, page=1, limit=limit or max(len(items), 1),
                        total=len(items), total_pages=1)
        if not isinstance(body, dict):
            raise UnexpectedError(f"GET {self.path}: unexpected list payload", body=repr(body)[:200])

        items = [self._parse(self.model, row) for row in body.get("data") or []]
        page_size = int(body.get("limit") or limit or max(len(items), 1))
        total = int(body.get("total", len(items)))
        total_pages = body.get("totalPages")
        if total_pages is None:
            total_pages = math.ceil(total / page_size) if page_size else 1
        return Page(
            items=items,
            page=int(body.get("page") or page or 1),
            limit=page_size,
            total=total,
            total_pages=int(total_pages),
        )

    async def count(self) -> int:
        body = await self._send("GET", f"{self.path}/count", idempotent=True)
        if isinstance(body, dict):
            body = body.get("count", body.get("total"))
        try:
            return int(body)
        except (TypeError, ValueError) as e:
            raise UnexpectedError(f"GET {self.path}/count: not a number", body=repr(body)[:200]) from e

    async def get_by_id(self, record_id: str) -> E:
        body = await self._send("GET", f"{self.path}/{record_id}", idempotent=True)
        return self._parse(self.model, body)

    async def create(self, payload: Union[ApiModel, Dict[str, Any]]) -> E:
        body = await self._send("POST", self.path, json=_dump(payload, partial=False))
        return self._parse(self.model, body)

    async def update(self, record_id: str, patch: Union[ApiModel, Dict[str, Any]]) -> E:
        body = await self._send("PATCH", f"{self.path}/{record_id}", json=_dump(patch, partial=True))
        return self._parse(self.model, body)

    async def delete(self, record_id: str) -> None:
        await self._send("DELETE", f"{self.path}/{record_id}")


def build_gateways(session: SessionContext, retry: Optional[RetryPolicy] = None) -> Dict[EntityKind, EntityGateway]:
    return {kind: EntityGateway(session, kind, retry) for kind in EntityKind}


# ---- assistant ----
class ChatGateway(_Gateway):
    path = "/task-manager/chat"

    async def send_message(self, query: str, session_id: Optional[str] = None) -> ChatResponse:
        request = ChatRequest(query=query, session_id=session_id)
        body = await self._send("POST", self.path, json=_dump(request, partial=False))
        return self._parse(ChatResponse, body)
