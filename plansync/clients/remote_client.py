"""HTTP client for the remote canonical store."""
import logging
from typing import Any, Optional

import httpx

from plansync.models.objective import ObjectiveCreate
from plansync.models.task import TaskCreate, TaskStatusUpdate
from plansync.models.user import AuthResponse

logger = logging.getLogger(__name__)


def _wire(payload) -> dict:
    """Serialize a request model the way the remote expects it (camelCase, no nulls)."""
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


class RemoteClient:
    """
    Async client for the remote store's REST API.

    Every call raises ``httpx.HTTPStatusError`` for non-2xx responses and
    ``httpx.TransportError`` subclasses for network failures. Entity
    payloads are returned as raw JSON so the caller can reject malformed
    items one by one without losing the rest of the list.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )
        self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        """Set (or clear with None) the bearer token sent with every request."""
        self.token = token
        if token:
            self._client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._client.headers.pop("Authorization", None)

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        logger.debug("%s %s -> %s", method, path, response.status_code)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    # Objectives

    async def get_objectives(self) -> list[dict]:
        data = await self._request("GET", "/objectives")
        return data["objectives"]

    async def get_objective(self, objective_id: str) -> dict:
        """
        Fetch the full objective including pillars, metrics and rituals.

        Returns:
            The raw ``objective`` object from the response body
        """
        data = await self._request("GET", f"/objectives/{objective_id}")
        return data["objective"]

    async def create_objective(self, payload: ObjectiveCreate) -> dict:
        data = await self._request("POST", "/objectives", json=_wire(payload))
        return data.get("objective", data) if isinstance(data, dict) else data

    # Tasks

    async def get_tasks(self, date_iso: str) -> list[dict]:
        data = await self._request("GET", "/tasks", params={"date": date_iso})
        return data["tasks"]

    async def create_task(self, payload: TaskCreate) -> dict:
        data = await self._request("POST", "/tasks", json=_wire(payload))
        return data.get("task", data) if isinstance(data, dict) else data

    async def update_task(self, task_id: str, payload: TaskStatusUpdate) -> dict:
        # Explicit nulls matter here: clearing completedAt must reach the remote
        body = payload.model_dump(mode="json", by_alias=True)
        data = await self._request("PATCH", f"/tasks/{task_id}", json=body)
        return data.get("task", data) if isinstance(data, dict) else data

    # Auth

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        data = await self._request(
            "POST", "/auth/signin", json={"email": email, "password": password}
        )
        return AuthResponse.model_validate(data)

    async def sign_up(self, email: str, password: str, name: str) -> AuthResponse:
        data = await self._request(
            "POST",
            "/auth/signup",
            json={"email": email, "password": password, "name": name},
        )
        return AuthResponse.model_validate(data)

    async def sign_out(self) -> None:
        await self._request("POST", "/auth/signout")
