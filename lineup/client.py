"""HTTP client for the bulk preview/apply endpoints.

Credentials travel in an explicit :class:`ClientSession`; nothing is read
from module or process state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

from lineup.domain.models import BulkAction, BulkApplyResult, PreviewResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds


class ApiError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ConflictError(ApiError):
    """Raised when apply is refused because conflicts remain."""

    @property
    def conflicts(self) -> list[dict]:
        if isinstance(self.detail, dict):
            return self.detail.get("conflicts", [])
        return []


@dataclass(frozen=True)
class ClientSession:
    """Where to send requests and who is sending them."""

    base_url: str
    admin_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.admin_token:
            headers["Authorization"] = f"Bearer {self.admin_token}"
        return headers


class LineupClient:
    """Thin wrapper over ``/performances/bulk-preview`` and ``bulk-apply``.

    Pass ``transport`` (for example ``httpx.MockTransport``) to talk to
    something other than the network.
    """

    def __init__(
        self,
        session: ClientSession,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not session.base_url:
            raise ValueError("base_url is required")
        self._session = session
        self._client = httpx.Client(
            base_url=session.base_url.rstrip("/"),
            headers=session.headers(),
            timeout=session.timeout,
            transport=transport,
        )

    def __enter__(self) -> LineupClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def preview(self, performance_ids: Iterable[int], action: BulkAction) -> PreviewResult:
        body = self._post(
            "/performances/bulk-preview",
            {"performance_ids": list(performance_ids), "action": action.model_dump()},
        )
        return PreviewResult.model_validate(body)

    def apply(
        self,
        performance_ids: Iterable[int],
        action: BulkAction,
        *,
        ignore_conflicts: bool = False,
    ) -> BulkApplyResult:
        body = self._post(
            "/performances/bulk-apply",
            {
                "performance_ids": list(performance_ids),
                "action": action.model_dump(),
                "ignore_conflicts": ignore_conflicts,
            },
        )
        return BulkApplyResult.model_validate(body)

    def _post(self, path: str, payload: dict[str, Any]) -> Any:
        try:
            response = self._client.post(path, json=payload)
        except httpx.ConnectError as e:
            raise ApiError(f"Failed to connect to server: {e}")
        except httpx.TimeoutException as e:
            raise ApiError(f"Connection timed out: {e}")

        if response.is_success:
            return response.json()

        try:
            error_body = response.json()
            detail = error_body.get("detail") if isinstance(error_body, dict) else error_body
        except ValueError:
            detail = response.text
        logger.debug("POST %s returned %s: %s", path, response.status_code, detail)
        if response.status_code == 409:
            raise ConflictError("Conflicts remain", status_code=409, detail=detail)
        message = detail if isinstance(detail, str) else f"Request failed ({response.status_code})"
        raise ApiError(message, status_code=response.status_code, detail=detail)
