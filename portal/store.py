"""Process-wide state stores for accounts, projects and stakeholders.

``AccountStore`` caches accounts from the backend. Reads are synchronous cache
lookups; writes go through :class:`portal.gateway.PortalAPI` and then resync
the cache with a full ``refresh()``. Delete is the exception: the entry is
dropped locally once the backend confirms. No gateway error crosses the
store's public methods; failures come back as ``False``/``None``/``[]`` plus a
notification.

Concurrent refreshes are not coalesced. Whichever list response resolves last
replaces the cache.

Projects (on ``AccountStore``) and stakeholders (``StakeholderStore``) have no
backend endpoints and live only in memory, keyed by id.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import ValidationError

from portal.config import load_profiles_on_refresh
from portal.gateway import APIError, PortalAPI
from portal.mapper import (
    account_from_wire,
    account_to_create,
    account_to_update,
    profile_from_wire,
    profile_to_create,
    profile_to_update,
)
from portal.models import Account, Project, Stakeholder, StrategicProfile
from portal.rules import derived_financials, relationship_score

log = logging.getLogger(__name__)

# Editing any of these re-sends both shortfall and health score, so a
# revenue-only edit also restamps shortfall from the cached target/forecast.
FINANCIAL_INPUTS = ("target_2026", "current_revenue", "forecast_revenue")
_PROFILE_IDENTITY = {"id", "account_id", "account_name", "created_at", "updated_at"}
_NESTED = {"projects", "stakeholders", "strategic_profiles"}


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"  # "default" | "destructive"


Notifier = Callable[[Notification], None]


def log_notification(note: Notification) -> None:
    level = logging.WARNING if note.variant == "destructive" else logging.INFO
    log.log(level, "%s: %s", note.title, note.description)


def _error(description: str) -> Notification:
    return Notification("Error", description, "destructive")


def _success(description: str) -> Notification:
    return Notification("Success", description)


# ---------------------------------------------------------------------------
# Account store
# ---------------------------------------------------------------------------


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class AccountStore:
    """Cache of accounts backed by the portal API.

    Args:
        api: Gateway used for every remote call.
        notify: Receives user-facing success/error notifications.
        load_profiles: Attach each account's strategic profile during
            ``refresh()``. Defaults to the ``PORTAL_LOAD_PROFILES`` setting.
    """

    def __init__(
        self,
        api: PortalAPI | None = None,
        notify: Notifier | None = None,
        load_profiles: bool | None = None,
    ) -> None:
        self._api = api if api is not None else PortalAPI()
        self._notify = notify or log_notification
        self._load_profiles = load_profiles_on_refresh() if load_profiles is None else load_profiles
        self._accounts: list[Account] = []
        self._projects: dict[str, Project] = {}
        self.state = StoreState.UNINITIALIZED
        self.error: str | None = None

    # -- Reads ----------------------------------------------------------------

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def is_loading(self) -> bool:
        return self.state is StoreState.LOADING

    def get_by_id(self, account_id: str) -> Account | None:
        """Cached account, or ``None`` if it has not been loaded (yet)."""
        for account in self._accounts:
            if account.account_id == account_id:
                return account
        return None

    # -- Remote-backed operations ---------------------------------------------

    async def refresh(self) -> None:
        self.state = StoreState.LOADING
        self.error = None
        loaded = False
        try:
            wires = await self._api.list_accounts()
            accounts = [account_from_wire(w) for w in wires]
            if self._load_profiles and accounts:
                await asyncio.gather(*(self._attach_profile(a) for a in accounts))
            loaded = True
        except APIError as exc:
            log.error("Failed to fetch accounts: %s", exc)
            self.error = exc.message or "Failed to fetch accounts"
            self._notify(_error("Failed to load accounts. Please try again."))
            return
        finally:
            # Contract violations still propagate, but never leave LOADING behind.
            if not loaded:
                self.error = self.error or "Failed to fetch accounts"
                self.state = StoreState.ERROR

        self._accounts = accounts
        self.state = StoreState.READY
        log.debug("Account cache replaced with %d accounts", len(accounts))

    async def _attach_profile(self, account: Account) -> None:
        try:
            details = await self._api.get_stakeholder_details_by_account(account.account_id)
            profile = profile_from_wire(details[0]) if details else None
        except (APIError, ValidationError) as exc:
            log.warning("Failed to fetch stakeholder details for account %s: %s", account.account_id, exc)
            return
        if profile is not None:
            account.strategic_profiles = [profile]

    async def fetch_one(self, account_id: str) -> Account | None:
        """Fetch one account and upsert it into the cache."""
        try:
            wire = await self._api.get_account(account_id)
        except APIError as exc:
            log.warning("Failed to fetch account %s: %s", account_id, exc)
            self._notify(_error("Failed to load account details"))
            return None

        fetched = account_from_wire(wire)
        existing = self.get_by_id(fetched.account_id)
        if existing is None:
            self._accounts = [*self._accounts, fetched]
            return fetched
        merged = existing.model_copy(update=fetched.model_dump(exclude=_NESTED))
        self._replace(merged)
        return merged

    async def fetch_profile_for(self, account_id: str) -> None:
        """Attach the account's strategic profile; failures are only logged."""
        try:
            details = await self._api.get_stakeholder_details_by_account(account_id)
            profile = profile_from_wire(details[0]) if details else None
        except (APIError, ValidationError) as exc:
            log.warning("Failed to fetch stakeholder details for account %s: %s", account_id, exc)
            return
        account = self.get_by_id(account_id)
        if profile is None or account is None:
            return
        self._replace(account.model_copy(update={"strategic_profiles": [profile]}))

    async def create(self, account: Account, profile: StrategicProfile | None = None) -> bool:
        """Create an account (and optionally its profile), then resync the cache."""
        account = account.model_copy(update=derived_financials(
            account.target_2026, account.current_revenue, account.forecast_revenue,
        ))
        try:
            created = await self._api.create_account(account_to_create(account))
        except APIError as exc:
            log.error("Failed to create account: %s", exc)
            self._notify(_error("Failed to create account"))
            return False

        if profile is not None:
            try:
                await self._api.create_stakeholder_details(
                    profile_to_create(profile, created.account_id, created.account_name),
                )
            except APIError as exc:
                log.warning("Failed to create stakeholder details for %s: %s", created.account_id, exc)

        await self.refresh()
        self._notify(_success("Account created successfully"))
        return True

    async def update(
        self,
        account_id: str,
        updates: dict[str, Any],
        profile_updates: dict[str, Any] | None = None,
    ) -> bool:
        """Send a partial patch (and optional profile patch), then resync the cache."""
        patch = dict(updates)
        current = self.get_by_id(account_id)
        touched = any(k in patch for k in FINANCIAL_INPUTS)
        # An uncached account is "not loaded", not zero; derive only from known inputs.
        if touched and (current is not None or all(k in patch for k in FINANCIAL_INPUTS)):
            inputs = {
                k: (patch[k] if k in patch else getattr(current, k)) or 0 for k in FINANCIAL_INPUTS
            }
            patch.update(derived_financials(
                inputs["target_2026"], inputs["current_revenue"], inputs["forecast_revenue"],
            ))
        try:
            await self._api.update_account(account_id, account_to_update(patch))
            if profile_updates is not None:
                await self._write_profile(account_id, current, patch, profile_updates)
        except APIError as exc:
            log.error("Failed to update account %s: %s", account_id, exc)
            self._notify(_error("Failed to update account"))
            return False

        await self.refresh()
        self._notify(_success("Account updated successfully"))
        return True

    async def _write_profile(
        self,
        account_id: str,
        current: Account | None,
        patch: dict[str, Any],
        profile_updates: dict[str, Any],
    ) -> None:
        existing = current.strategic_profile if current else None
        if existing is not None:
            await self._api.update_stakeholder_details(existing.id, profile_to_update(profile_updates))
        elif current is not None:
            fields = {
                k: v for k, v in profile_updates.items()
                if k in StrategicProfile.model_fields and k not in _PROFILE_IDENTITY
            }
            account_name = patch.get("account_name") or current.account_name
            await self._api.create_stakeholder_details(
                profile_to_create(StrategicProfile(id="", **fields), account_id, account_name),
            )

    async def delete(self, account_id: str) -> bool:
        try:
            await self._api.delete_account(account_id)
        except APIError as exc:
            log.error("Failed to delete account %s: %s", account_id, exc)
            self._notify(_error("Failed to delete account"))
            return False
        self._accounts = [a for a in self._accounts if a.account_id != account_id]
        self._notify(_success("Account deleted successfully"))
        return True

    async def search_by_unit(self, unit: str) -> list[Account]:
        """Accounts for one delivery unit, straight from the backend; cache untouched."""
        try:
            wires = await self._api.search_accounts_by_unit(unit)
        except APIError as exc:
            log.warning("Failed to search accounts for unit %s: %s", unit, exc)
            self._notify(_error("Failed to search accounts"))
            return []
        return [account_from_wire(w) for w in wires]

    def _replace(self, account: Account) -> None:
        self._accounts = [
            account if a.account_id == account.account_id else a for a in self._accounts
        ]

    # -- Local-only projects --------------------------------------------------

    @property
    def projects(self) -> list[Project]:
        return list(self._projects.values())

    def get_project(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def projects_for_account(self, account_id: str) -> list[Project]:
        return [p for p in self._projects.values() if p.account_id == account_id]

    def add_project(self, project: Project) -> None:
        self._projects[project.project_id] = project

    def update_project(self, project_id: str, updates: dict[str, Any]) -> Project | None:
        current = self._projects.get(project_id)
        if current is None:
            return None
        updated = Project.model_validate({
            **current.model_dump(), **updates,
            "project_id": project_id, "updated_at": now_iso(),
        })
        self._projects[project_id] = updated
        return updated

    def delete_project(self, project_id: str) -> None:
        self._projects.pop(project_id, None)


# ---------------------------------------------------------------------------
# Stakeholder store
# ---------------------------------------------------------------------------


class StakeholderStore:
    """In-memory stakeholder records for list views.

    ``relationship_score`` and ``project_name`` are always recomputed on write:
    the score from ``is_champion`` and the number of connections, the project
    name from ``project_lookup(project_id)`` when a lookup is provided.
    """

    def __init__(self, project_lookup: Callable[[str], Project | None] | None = None) -> None:
        self._project_lookup = project_lookup
        self._stakeholders: dict[str, Stakeholder] = {}

    @property
    def stakeholders(self) -> list[Stakeholder]:
        return list(self._stakeholders.values())

    def get(self, stakeholder_id: str) -> Stakeholder | None:
        return self._stakeholders.get(stakeholder_id)

    def by_account(self, account_id: str) -> list[Stakeholder]:
        return [s for s in self._stakeholders.values() if s.account_id == account_id]

    def add(self, stakeholder: Stakeholder) -> Stakeholder:
        stakeholder = self._derive(stakeholder)
        self._stakeholders[stakeholder.stakeholder_id] = stakeholder
        return stakeholder

    def update(self, stakeholder_id: str, data: dict[str, Any]) -> Stakeholder | None:
        current = self._stakeholders.get(stakeholder_id)
        if current is None:
            return None
        merged = Stakeholder.model_validate({
            **current.model_dump(), **data,
            "stakeholder_id": stakeholder_id, "updated_at": now_iso(),
        })
        merged = self._derive(merged)
        self._stakeholders[stakeholder_id] = merged
        return merged

    def delete(self, stakeholder_id: str) -> None:
        self._stakeholders.pop(stakeholder_id, None)

    def _derive(self, stakeholder: Stakeholder) -> Stakeholder:
        derived: dict[str, Any] = {
            "relationship_score": relationship_score(stakeholder.is_champion, len(stakeholder.connections)),
        }
        project = self._project_lookup(stakeholder.project_id) if self._project_lookup else None
        if project is not None:
            derived["project_name"] = project.project_name
        return stakeholder.model_copy(update=derived)
