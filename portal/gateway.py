"""Async HTTP gateway for the account-dashboard and stakeholder-details API.

One method per backend operation. Every failure, whether a transport error or
a non-2xx response, surfaces as :class:`APIError` with a human-readable
message. The gateway holds no state beyond its connection settings.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from portal.config import api_base_url
from portal.schemas import (
    AccountDashboardCreate,
    AccountDashboardResponse,
    AccountDashboardUpdate,
    StakeholderDetailsCreate,
    StakeholderDetailsResponse,
    StakeholderDetailsUpdate,
)

log = logging.getLogger(__name__)

_FALLBACK_MESSAGE = "Something went wrong"


class APIError(Exception):
    """Backend call failed; ``message`` is safe to show to the user."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        return str(detail)
    return resp.reason_phrase or _FALLBACK_MESSAGE


class PortalAPI:
    """Typed client for the portal REST backend.

    Args:
        base_url: Versioned API root; defaults to :func:`portal.config.api_base_url`.
        transport: Optional httpx transport, used by tests to stub the backend.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=None,
            headers={"Accept": "application/json"},
        )

    async def _request(self, method: str, path: str, payload: dict | None = None) -> Any:
        log.debug("%s %s%s", method, self.base_url, path)
        try:
            async with self._client() as client:
                resp = await client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            message = str(exc) or type(exc).__name__
            log.warning("%s %s failed: %s", method, path, message)
            raise APIError(message) from exc

        if not resp.is_success:
            message = _error_message(resp)
            log.warning("%s %s returned %d: %s", method, path, resp.status_code, message)
            raise APIError(message, status_code=resp.status_code)
        if resp.status_code == 204:
            return None
        return resp.json()

    # -- Accounts -------------------------------------------------------------

    async def list_accounts(self) -> list[AccountDashboardResponse]:
        data = await self._request("GET", "/account-dashboard/")
        return [AccountDashboardResponse.model_validate(item) for item in data]

    async def get_account(self, account_id: str) -> AccountDashboardResponse:
        data = await self._request("GET", f"/account-dashboard/{account_id}")
        return AccountDashboardResponse.model_validate(data)

    async def create_account(self, payload: AccountDashboardCreate) -> AccountDashboardResponse:
        data = await self._request(
            "POST", "/account-dashboard/", payload.model_dump(exclude_none=True),
        )
        return AccountDashboardResponse.model_validate(data)

    async def update_account(
        self, account_id: str, payload: AccountDashboardUpdate,
    ) -> AccountDashboardResponse:
        data = await self._request(
            "PUT", f"/account-dashboard/{account_id}", payload.model_dump(exclude_unset=True),
        )
        return AccountDashboardResponse.model_validate(data)

    async def delete_account(self, account_id: str) -> None:
        await self._request("DELETE", f"/account-dashboard/{account_id}")

    async def search_accounts_by_unit(self, unit: str) -> list[AccountDashboardResponse]:
        data = await self._request("GET", f"/account-dashboard/search/unit/{unit}")
        return [AccountDashboardResponse.model_validate(item) for item in data]

    # -- Stakeholder details (strategic profiles) -----------------------------

    async def list_stakeholder_details(self) -> list[StakeholderDetailsResponse]:
        data = await self._request("GET", "/stakeholder-details/")
        return [StakeholderDetailsResponse.model_validate(item) for item in data]

    async def get_stakeholder_details(self, details_id: str) -> StakeholderDetailsResponse:
        data = await self._request("GET", f"/stakeholder-details/{details_id}")
        return StakeholderDetailsResponse.model_validate(data)

    async def get_stakeholder_details_by_account(
        self, account_id: str,
    ) -> list[StakeholderDetailsResponse]:
        data = await self._request("GET", f"/stakeholder-details/account/{account_id}")
        return [StakeholderDetailsResponse.model_validate(item) for item in data]

    async def create_stakeholder_details(
        self, payload: StakeholderDetailsCreate,
    ) -> StakeholderDetailsResponse:
        data = await self._request(
            "POST", "/stakeholder-details/", payload.model_dump(exclude_none=True),
        )
        return StakeholderDetailsResponse.model_validate(data)

    async def update_stakeholder_details(
        self, details_id: str, payload: StakeholderDetailsUpdate,
    ) -> StakeholderDetailsResponse:
        data = await self._request(
            "PUT", f"/stakeholder-details/{details_id}", payload.model_dump(exclude_unset=True),
        )
        return StakeholderDetailsResponse.model_validate(data)

    async def delete_stakeholder_details(self, details_id: str) -> None:
        await self._request("DELETE", f"/stakeholder-details/{details_id}")
