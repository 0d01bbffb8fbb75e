"""Authenticated session against the remote list service."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from recipe_importer.adapters.list_service_client import ListServiceClient
from recipe_importer.domain.errors import (
    AuthenticationError,
    RecipeImportError,
    RemoteServiceError,
)
from recipe_importer.domain.user_data import UserDataSnapshot
from recipe_importer.services import identity

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_AUTH_STATUS_CODES = {401, 403}

_logger = logging.getLogger(__name__)


@dataclass
class RemoteSession:
    """Single lazily authenticated session with a cached user-data snapshot.

    The snapshot cache is shared by all callers without locking. Callers that
    need read-after-write consistency must pass ``force_refresh=True``.
    """

    client: ListServiceClient
    email: str
    password: str
    is_authenticated: bool = field(default=False, init=False)
    _access_token: str | None = field(default=None, init=False, repr=False)
    _login_user_id: str | None = field(default=None, init=False, repr=False)
    _snapshot: UserDataSnapshot | None = field(default=None, init=False, repr=False)
    _user_id: str | None = field(default=None, init=False, repr=False)
    _user_id_resolved: bool = field(default=False, init=False, repr=False)
    _login_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    async def ensure_authenticated(self) -> None:
        """Log in once; a failed login leaves the session unauthenticated.

        Concurrent first callers share a single login.
        """
        if self.is_authenticated:
            return
        async with self._login_lock:
            if self.is_authenticated:
                return
            _logger.info("Logging into list service")
            try:
                result = await self.client.login(self.email, self.password)
            except Exception as exc:
                self.reset()
                _logger.warning("List service login failed: %s", exc)
                raise AuthenticationError(
                    "Could not authenticate with the list service. "
                    "Check your credentials."
                ) from exc
            self.reset()
            self._access_token = result.access_token
            self._login_user_id = result.user_id
            self.is_authenticated = True
            _logger.info("Authenticated with list service")

    async def get_user_data_snapshot(
        self, force_refresh: bool = False
    ) -> UserDataSnapshot:
        """Return the cached snapshot, fetching it when missing or forced."""
        await self.ensure_authenticated()
        if self._snapshot is not None and not force_refresh:
            return self._snapshot

        raw = await self._call(
            lambda: self.client.fetch_user_data(self._token()),
            action="fetch user data",
        )
        try:
            snapshot = UserDataSnapshot.model_validate(raw)
        except PydanticValidationError as exc:
            raise RemoteServiceError("Unexpected user data shape") from exc
        self._snapshot = snapshot
        _logger.info("Refreshed user data snapshot")
        return snapshot

    async def resolve_user_id(self) -> str | None:
        """Resolve the internal user id once per authenticated session."""
        await self.ensure_authenticated()
        if self._user_id_resolved:
            return self._user_id

        user_id = self._login_user_id
        if not user_id:
            snapshot = await self.get_user_data_snapshot()
            user_id = identity.resolve_user_id(snapshot, self.email)
        if user_id is None:
            _logger.warning(
                "Could not resolve list service user id; continuing without it"
            )
        self._user_id = user_id
        self._user_id_resolved = True
        return user_id

    async def save_recipe(
        self, recipe_data_id: str, recipe: dict[str, object]
    ) -> None:
        """Persist a service-native recipe payload."""
        await self.ensure_authenticated()
        await self._call(
            lambda: self.client.save_recipe(
                self._token(),
                recipe_data_id=recipe_data_id,
                recipe=recipe,
                user_id=self._user_id,
            ),
            action="save recipe",
        )

    async def add_recipes_to_collection(
        self, recipe_data_id: str, collection_id: str, recipe_ids: list[str]
    ) -> None:
        """Add recipe ids to a collection."""
        await self.ensure_authenticated()
        await self._call(
            lambda: self.client.add_recipes_to_collection(
                self._token(),
                recipe_data_id=recipe_data_id,
                collection_id=collection_id,
                recipe_ids=recipe_ids,
                user_id=self._user_id,
            ),
            action=f"add recipes to collection {collection_id}",
        )

    @property
    def user_id(self) -> str | None:
        """The resolved user id, if any."""
        return self._user_id

    def reset(self) -> None:
        """Drop authentication, snapshot, and resolved identity."""
        self.is_authenticated = False
        self._access_token = None
        self._login_user_id = None
        self._snapshot = None
        self._user_id = None
        self._user_id_resolved = False

    async def close(self) -> None:
        """Dispose of the session and its client."""
        self.reset()
        await self.client.close()

    def _token(self) -> str:
        if self._access_token is None:
            raise AuthenticationError("List service session is not authenticated")
        return self._access_token

    async def _call(
        self, func: "Callable[[], Awaitable[object]]", *, action: str
    ) -> object:
        """Run a remote call once, translating failures to import errors."""
        try:
            return await func()
        except RecipeImportError:
            raise
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code in _AUTH_STATUS_CODES:
                self.reset()
                raise AuthenticationError(
                    f"List service rejected the session during {action}"
                ) from exc
            raise RemoteServiceError(
                f"List service failed to {action} (status={status_code})"
            ) from exc
        except Exception as exc:
            raise RemoteServiceError(
                f"List service failed to {action}: {exc}"
            ) from exc
